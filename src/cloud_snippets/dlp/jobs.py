"""Asynchronous DLP resources: inspection jobs, job triggers and stored info types.

These calls only create, describe or delete server-side resources. A job's
progress is read with a single ``describe_dlp_job`` call and classified into
``JobState``; waiting for completion is left to the caller.
"""

import datetime
import logging
from typing import Callable, Iterable, List, Optional, Sequence, TextIO

from google.cloud import dlp_v2

from ..errors import ConfigurationError, remote_call
from ..factory import build_dlp_client, open_client
from ..models.entities import DEFAULT_INFO_TYPES, DLP_JOB_STATES, JobState, JobSummary
from . import builders

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], dlp_v2.DlpServiceClient]

SCC_INFO_TYPES = ["EMAIL_ADDRESS", "PERSON_NAME", "LOCATION", "PHONE_NUMBER"]
SCC_MAX_FINDINGS_PER_ITEM = 100

# Limits DLP enforces on a trigger's recurrence period.
MIN_RECURRENCE_DAYS = 1
MAX_RECURRENCE_DAYS = 60

# Public BigQuery column used as the source of the sample large dictionary.
GITHUB_ACTORS_FIELD = ("bigquery-public-data", "samples", "github_nested", "actor")


def _resource_name(project_id: str, collection: str, resource_id: str, operation: str) -> str:
    if not resource_id or not resource_id.strip():
        raise ConfigurationError(operation, f"{collection} id must not be empty")
    if resource_id.startswith("projects/"):
        return resource_id
    return f"{builders.parent_path(project_id)}/{collection}/{resource_id}"


def classify_job_state(state) -> JobState:
    """Map a ``DlpJob.JobState`` onto SUBMITTED / RUNNING / DONE / FAILED."""
    name = dlp_v2.DlpJob.JobState(state).name
    return DLP_JOB_STATES.get(name, JobState.SUBMITTED)


def _job_inspect_config(
    info_type_names: Optional[Iterable[str]],
    custom_dictionaries: Optional[Sequence[Sequence[str]]],
    custom_regexes: Optional[Sequence[str]],
    min_likelihood,
) -> dlp_v2.InspectConfig:
    """InspectConfig for a storage job.

    Each word list becomes ``CUSTOM_DICTIONARY_<i>`` and each regex
    ``CUSTOM_REGEX_<i>``. Without any detector the common PII set is used.
    """
    custom = [
        builders.build_word_list_custom_info_type(f"CUSTOM_DICTIONARY_{i}", words)
        for i, words in enumerate(custom_dictionaries or [])
    ]
    custom += [
        builders.build_regex_custom_info_type(f"CUSTOM_REGEX_{i}", pattern)
        for i, pattern in enumerate(custom_regexes or [])
    ]
    if not info_type_names and not custom:
        info_type_names = DEFAULT_INFO_TYPES
    return builders.build_inspect_config(
        info_type_names=info_type_names,
        custom_info_types=custom,
        min_likelihood=min_likelihood,
    )


def _pubsub_actions(project_id: str, pubsub_topic: Optional[str]) -> List[dlp_v2.Action]:
    if not pubsub_topic:
        return []
    topic = pubsub_topic
    if not topic.startswith("projects/"):
        topic = f"projects/{project_id}/topics/{topic}"
    return [dlp_v2.Action(pub_sub=dlp_v2.Action.PublishToPubSub(topic=topic))]


def _create_inspect_job(
    w: TextIO,
    project_id: str,
    inspect_job: dlp_v2.InspectJobConfig,
    client_factory: ClientFactory,
    operation: str,
    source: str,
) -> str:
    parent = builders.parent_path(project_id)
    with open_client(client_factory, operation) as client, remote_call("CreateDlpJob"):
        logger.info("%s: creating job for %s", operation, source)
        job = client.create_dlp_job(request={"parent": parent, "inspect_job": inspect_job})

    print(f"Job created successfully: {job.name}", file=w)
    return job.name


def inspect_gcs_file(
    w: TextIO,
    project_id: str,
    bucket_name: str,
    file_name: str,
    info_type_names: Optional[Iterable[str]] = None,
    custom_dictionaries: Optional[Sequence[Sequence[str]]] = None,
    custom_regexes: Optional[Sequence[str]] = None,
    min_likelihood=None,
    *,
    pubsub_topic: Optional[str] = None,
    client_factory: ClientFactory = build_dlp_client,
) -> str:
    """Start a job scanning ``gs://<bucket_name>/<file_name>``.

    ``file_name`` may contain wildcards. When ``pubsub_topic`` is given DLP
    publishes to it once the job finishes. Returns the job name.
    """
    operation = "inspect_gcs_file"
    builders.parent_path(project_id)
    if not bucket_name or not file_name:
        raise ConfigurationError(operation, "bucket and file name must not be empty")

    url = f"gs://{bucket_name}/{file_name}"
    inspect_job = dlp_v2.InspectJobConfig(
        storage_config=dlp_v2.StorageConfig(
            cloud_storage_options=dlp_v2.CloudStorageOptions(
                file_set=dlp_v2.CloudStorageOptions.FileSet(url=url)
            )
        ),
        inspect_config=_job_inspect_config(
            info_type_names, custom_dictionaries, custom_regexes, min_likelihood
        ),
        actions=_pubsub_actions(project_id, pubsub_topic),
    )
    return _create_inspect_job(w, project_id, inspect_job, client_factory, operation, url)


def inspect_bigquery(
    w: TextIO,
    project_id: str,
    dataset_id: str,
    table_id: str,
    info_type_names: Optional[Iterable[str]] = None,
    custom_dictionaries: Optional[Sequence[Sequence[str]]] = None,
    custom_regexes: Optional[Sequence[str]] = None,
    min_likelihood=None,
    *,
    table_project_id: Optional[str] = None,
    pubsub_topic: Optional[str] = None,
    client_factory: ClientFactory = build_dlp_client,
) -> str:
    """Start a job scanning a BigQuery table (in ``project_id`` unless ``table_project_id`` is set)."""
    operation = "inspect_bigquery"
    builders.parent_path(project_id)
    if not dataset_id or not table_id:
        raise ConfigurationError(operation, "dataset and table id must not be empty")

    table = dlp_v2.BigQueryTable(
        project_id=table_project_id or project_id,
        dataset_id=dataset_id,
        table_id=table_id,
    )
    inspect_job = dlp_v2.InspectJobConfig(
        storage_config=dlp_v2.StorageConfig(
            big_query_options=dlp_v2.BigQueryOptions(table_reference=table)
        ),
        inspect_config=_job_inspect_config(
            info_type_names, custom_dictionaries, custom_regexes, min_likelihood
        ),
        actions=_pubsub_actions(project_id, pubsub_topic),
    )
    source = f"{table.project_id}.{dataset_id}.{table_id}"
    return _create_inspect_job(w, project_id, inspect_job, client_factory, operation, source)


def _datastore_storage_config(
    datastore_project_id: str,
    datastore_namespace: str,
    datastore_kind: str,
) -> dlp_v2.StorageConfig:
    return dlp_v2.StorageConfig(
        datastore_options=dlp_v2.DatastoreOptions(
            partition_id=dlp_v2.PartitionId(
                project_id=datastore_project_id,
                namespace_id=datastore_namespace or "",
            ),
            kind=dlp_v2.KindExpression(name=datastore_kind),
        )
    )


def inspect_datastore(
    w: TextIO,
    project_id: str,
    datastore_namespace: str,
    datastore_kind: str,
    info_type_names: Optional[Iterable[str]] = None,
    custom_dictionaries: Optional[Sequence[Sequence[str]]] = None,
    custom_regexes: Optional[Sequence[str]] = None,
    min_likelihood=None,
    *,
    datastore_project_id: Optional[str] = None,
    pubsub_topic: Optional[str] = None,
    client_factory: ClientFactory = build_dlp_client,
) -> str:
    """Start a job scanning every entity of a Datastore kind."""
    operation = "inspect_datastore"
    builders.parent_path(project_id)
    if not datastore_kind:
        raise ConfigurationError(operation, "datastore kind must not be empty")

    inspect_job = dlp_v2.InspectJobConfig(
        storage_config=_datastore_storage_config(
            datastore_project_id or project_id, datastore_namespace, datastore_kind
        ),
        inspect_config=_job_inspect_config(
            info_type_names, custom_dictionaries, custom_regexes, min_likelihood
        ),
        actions=_pubsub_actions(project_id, pubsub_topic),
    )
    return _create_inspect_job(w, project_id, inspect_job, client_factory, operation, datastore_kind)


def inspect_datastore_send_to_scc(
    w: TextIO,
    project_id: str,
    datastore_namespace: str,
    datastore_kind: str,
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> str:
    """Start a job scanning a Datastore kind and publish its summary to Security Command Center."""
    operation = "inspect_datastore_send_to_scc"
    builders.parent_path(project_id)
    if not datastore_kind:
        raise ConfigurationError(operation, "datastore kind must not be empty")

    inspect_config = builders.build_inspect_config(
        info_type_names=SCC_INFO_TYPES,
        min_likelihood=dlp_v2.Likelihood.UNLIKELY,
    )
    inspect_config.limits = dlp_v2.InspectConfig.FindingLimits(
        max_findings_per_item=SCC_MAX_FINDINGS_PER_ITEM
    )
    inspect_job = dlp_v2.InspectJobConfig(
        storage_config=_datastore_storage_config(project_id, datastore_namespace, datastore_kind),
        inspect_config=inspect_config,
        actions=[dlp_v2.Action(publish_summary_to_cscc=dlp_v2.Action.PublishSummaryToCscc())],
    )
    return _create_inspect_job(w, project_id, inspect_job, client_factory, operation, datastore_kind)


def describe_dlp_job(
    w: TextIO,
    job_name: str,
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> JobSummary:
    """Fetch a job once and report where it is in its lifecycle."""
    operation = "describe_dlp_job"
    if not job_name:
        raise ConfigurationError(operation, "job name must not be empty")

    with open_client(client_factory, operation) as client, remote_call("GetDlpJob"):
        job = client.get_dlp_job(request={"name": job_name})

    raw_state = dlp_v2.DlpJob.JobState(job.state).name
    summary = JobSummary(
        name=job.name,
        state=classify_job_state(job.state),
        raw_state=raw_state,
        errors=[error.details.message for error in job.errors],
    )
    logger.info("%s: %s is %s", operation, summary.name, raw_state)
    print(f"Job {summary.name} status: {summary.state.value} ({raw_state})", file=w)
    for message in summary.errors:
        print(f"Error: {message}", file=w)
    return summary


def delete_dlp_job(
    w: TextIO,
    job_name: str,
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> None:
    operation = "delete_dlp_job"
    if not job_name:
        raise ConfigurationError(operation, "job name must not be empty")

    with open_client(client_factory, operation) as client, remote_call("DeleteDlpJob"):
        client.delete_dlp_job(request={"name": job_name})
    print(f"Successfully deleted {job_name}", file=w)


def create_job_trigger(
    w: TextIO,
    project_id: str,
    bucket: str,
    trigger_id: str,
    scan_period_days: int = 1,
    info_type_names: Optional[Iterable[str]] = None,
    min_likelihood=None,
    max_findings: Optional[int] = None,
    display_name: str = "",
    description: str = "",
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> str:
    """Create a trigger that rescans ``gs://<bucket>/*`` every ``scan_period_days`` days.

    Only objects changed since the previous run are scanned.
    """
    operation = "create_job_trigger"
    parent = builders.parent_path(project_id)
    if not bucket:
        raise ConfigurationError(operation, "bucket must not be empty")
    if not MIN_RECURRENCE_DAYS <= scan_period_days <= MAX_RECURRENCE_DAYS:
        raise ConfigurationError(
            operation,
            f"scan period must be between {MIN_RECURRENCE_DAYS} and {MAX_RECURRENCE_DAYS} days",
        )

    inspect_job = dlp_v2.InspectJobConfig(
        storage_config=dlp_v2.StorageConfig(
            cloud_storage_options=dlp_v2.CloudStorageOptions(
                file_set=dlp_v2.CloudStorageOptions.FileSet(url=f"gs://{bucket}/*")
            ),
            timespan_config=dlp_v2.StorageConfig.TimespanConfig(
                enable_auto_population_of_timespan_config=True
            ),
        ),
        inspect_config=builders.build_inspect_config(
            info_type_names=info_type_names or SCC_INFO_TYPES,
            min_likelihood=min_likelihood,
            max_findings=max_findings,
        ),
    )
    job_trigger = dlp_v2.JobTrigger(
        inspect_job=inspect_job,
        display_name=display_name,
        description=description,
        triggers=[
            dlp_v2.JobTrigger.Trigger(
                schedule=dlp_v2.Schedule(
                    recurrence_period_duration=datetime.timedelta(days=scan_period_days)
                )
            )
        ],
        status=dlp_v2.JobTrigger.Status.HEALTHY,
    )

    with open_client(client_factory, operation) as client, remote_call("CreateJobTrigger"):
        logger.info("%s: creating trigger %s for gs://%s", operation, trigger_id, bucket)
        response = client.create_job_trigger(
            request={"parent": parent, "job_trigger": job_trigger, "trigger_id": trigger_id}
        )

    print(f"Successfully created trigger {response.name}", file=w)
    return response.name


def delete_job_trigger(
    w: TextIO,
    project_id: str,
    trigger_id: str,
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> None:
    """Delete a trigger given its id or full resource name."""
    operation = "delete_job_trigger"
    name = _resource_name(project_id, "jobTriggers", trigger_id, operation)

    with open_client(client_factory, operation) as client, remote_call("DeleteJobTrigger"):
        client.delete_job_trigger(request={"name": name})
    print(f"Trigger {name} successfully deleted.", file=w)


def create_stored_info_type(
    w: TextIO,
    project_id: str,
    output_bucket_name: str,
    stored_info_type_id: str = "github-usernames",
    display_name: str = "GitHub usernames",
    description: str = "Dictionary of GitHub usernames used in commits",
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> str:
    """Build a large custom dictionary from GitHub actor names into ``gs://<output_bucket_name>``."""
    operation = "create_stored_info_type"
    parent = builders.parent_path(project_id)
    if not output_bucket_name:
        raise ConfigurationError(operation, "output bucket must not be empty")

    source_project, dataset, table, field = GITHUB_ACTORS_FIELD
    config = dlp_v2.StoredInfoTypeConfig(
        display_name=display_name,
        description=description,
        large_custom_dictionary=dlp_v2.LargeCustomDictionaryConfig(
            output_path=dlp_v2.CloudStoragePath(path=f"gs://{output_bucket_name}"),
            big_query_field=dlp_v2.BigQueryField(
                table=dlp_v2.BigQueryTable(
                    project_id=source_project, dataset_id=dataset, table_id=table
                ),
                field=dlp_v2.FieldId(name=field),
            ),
        ),
    )

    with open_client(client_factory, operation) as client, remote_call("CreateStoredInfoType"):
        logger.info("%s: creating %s", operation, stored_info_type_id)
        response = client.create_stored_info_type(
            request={"parent": parent, "config": config, "stored_info_type_id": stored_info_type_id}
        )

    print(f"Created Stored InfoType: {response.name}", file=w)
    return response.name


def delete_stored_info_type(
    w: TextIO,
    project_id: str,
    stored_info_type_id: str,
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> None:
    operation = "delete_stored_info_type"
    name = _resource_name(project_id, "storedInfoTypes", stored_info_type_id, operation)

    with open_client(client_factory, operation) as client, remote_call("DeleteStoredInfoType"):
        client.delete_stored_info_type(request={"name": name})
    print(f"Successfully deleted {name}", file=w)

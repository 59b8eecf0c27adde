"""Open-data catalog client.

Crawls a Socrata-style discovery API for candidate datasets and downloads the
ones worth profiling. A downloaded file that turns out to be unsuitable is
kept, with a sibling ".ignore" file recording why.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from fieldscore.core.errors import ConfigError, FatalIOError
from fieldscore.core.logging import get_logger

logger = get_logger(__name__)

PAGE_SIZE = 100
MIN_DOWNLOAD_COUNT = 20


@dataclass(frozen=True)
class CatalogSource:
    """A discovery endpoint and the local directory its files land in."""

    name: str
    discovery_url: str
    data_directory: Path


CATALOG_SOURCES: dict[str, CatalogSource] = {
    "socrata": CatalogSource(
        "socrata",
        "http://api.us.socrata.com/api/catalog/v1",
        Path("data/opendata_socrata_com"),
    ),
    "data.sfgov.org": CatalogSource(
        "data.sfgov.org",
        "http://data.sfgov.org/api/catalog/v1",
        Path("data/data_sfgov_org"),
    ),
}


def get_catalog_source(name: str) -> CatalogSource:
    """Look up a catalog by name.

    Raises:
        ConfigError: For an unknown catalog
    """
    try:
        return CATALOG_SOURCES[name]
    except KeyError:
        known = ", ".join(sorted(CATALOG_SOURCES))
        raise ConfigError(f"Unknown source: {name} (expected one of {known})") from None


# === Discovery response ===


class _Resource(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    download_count: int = 0


class _Metadata(BaseModel):
    model_config = ConfigDict(extra="ignore")

    domain: str


class _Result(BaseModel):
    model_config = ConfigDict(extra="ignore")

    resource: _Resource
    metadata: _Metadata


class DiscoveryResponse(BaseModel):
    """One page of catalog results."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    results: list[_Result] = Field(default_factory=list)
    result_set_size: int = Field(default=0, alias="resultSetSize")


@dataclass(frozen=True)
class DataSet:
    """A downloadable dataset: the host serving it and its resource id."""

    host: str
    id: str

    @property
    def url(self) -> str:
        return f"https://{self.host}/resource/{self.id}.csv"


class DownloadStatus(str, Enum):
    SAVED = "saved"
    EXISTS = "exists"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(frozen=True)
class DownloadOutcome:
    dataset: DataSet
    path: Path
    status: DownloadStatus
    reason: str = ""


class CatalogClient:
    """Discovery and download against one catalog source."""

    def __init__(
        self,
        source: CatalogSource,
        client: httpx.Client | None = None,
        timeout: float = 10.0,
    ):
        self.source = source
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)
        self._owns_client = client is None

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> CatalogClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def _fetch_page(self, params: dict[str, str]) -> DiscoveryResponse:
        try:
            response = self._client.get(
                self.source.discovery_url,
                params=params,
                headers={"Accept": "application/json"},
            )
            response.raise_for_status()
            return DiscoveryResponse.model_validate_json(response.content)
        except httpx.HTTPError as e:
            raise FatalIOError(f"Catalog request failed: {e}") from e
        except ValidationError as e:
            raise FatalIOError(f"Cannot parse catalog response: {e}") from e

    def discover(
        self,
        column: str | None = None,
        min_download_count: int = MIN_DOWNLOAD_COUNT,
    ) -> list[DataSet]:
        """Page through the catalog collecting popular public datasets.

        Args:
            column: Only datasets with a column of this name
            min_download_count: Keep datasets downloaded more often than this

        Raises:
            FatalIOError: If a page cannot be fetched or parsed
        """
        params = {"public": "true", "limit": str(PAGE_SIZE)}
        if column:
            params["column_names"] = column

        datasets: list[DataSet] = []
        retrieved = 0
        last_resource_id = ""
        while True:
            page = self._fetch_page({**params, "scroll_id": last_resource_id})
            logger.info(
                "catalog_page_fetched",
                source=self.source.name,
                results=len(page.results),
                result_set_size=page.result_set_size,
            )
            for result in page.results:
                if result.resource.download_count > min_download_count:
                    datasets.append(DataSet(result.metadata.domain, result.resource.id))
                retrieved += 1
                last_resource_id = result.resource.id

            if not page.results or retrieved >= page.result_set_size:
                break

        logger.info("catalog_discovery_complete", source=self.source.name, datasets=len(datasets))
        return datasets

    def download(
        self,
        dataset: DataSet,
        max_columns: int = 40,
        min_lines: int = 20,
        data_directory: Path | None = None,
    ) -> DownloadOutcome:
        """Fetch a dataset unless already present, then vet its shape.

        Args:
            dataset: Dataset to fetch
            max_columns: Reject files with more header columns (-1 = unlimited)
            min_lines: Reject files with fewer data lines
            data_directory: Root directory (defaults to the source's)

        Raises:
            FatalIOError: If the file or its marker cannot be written locally
        """
        directory = (data_directory or self.source.data_directory) / dataset.host
        path = directory / f"{dataset.id}.csv"
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FatalIOError(f"Cannot create {directory}: {e}") from e

        if path.exists():
            logger.info("dataset_already_downloaded", path=str(path))
            return DownloadOutcome(dataset, path, DownloadStatus.EXISTS)

        try:
            response = self._client.get(dataset.url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("dataset_download_failed", url=dataset.url, error=str(e))
            return DownloadOutcome(dataset, path, DownloadStatus.FAILED, str(e))

        reason = _vet(response.text, max_columns, min_lines)
        try:
            path.write_bytes(response.content)
            if reason:
                mark_ignored(path, reason)
        except OSError as e:
            raise FatalIOError(f"Cannot save {path}: {e}") from e

        if reason:
            logger.info("dataset_rejected", path=str(path), reason=reason)
            return DownloadOutcome(dataset, path, DownloadStatus.REJECTED, reason)

        logger.info("dataset_saved", path=str(path))
        return DownloadOutcome(dataset, path, DownloadStatus.SAVED)


def _vet(text: str, max_columns: int, min_lines: int) -> str:
    lines = text.splitlines()
    header = next(csv.reader(io.StringIO(lines[0])), []) if lines else []

    if max_columns != -1 and (len(header) > max_columns or len(header) == 0):
        return f"Bad number of ({len(header)}) columns"

    data_lines = len(lines) - 1 if lines else 0
    if data_lines < min_lines:
        return f"Too few ({data_lines}) lines"
    return ""


def mark_ignored(path: Path, reason: str) -> Path:
    """Record why a downloaded file is unsuitable."""
    marker = path.with_name(path.name + ".ignore")
    marker.write_text(reason + "\n", encoding="utf-8")
    return marker

"""Application level helpers for assembling pipeline dependencies."""
from __future__ import annotations

from dataclasses import dataclass

from elasticsearch import Elasticsearch

from .cache import CacheStore, FileCache
from .clients import StortingClient
from .config import AppConfig
from .pipeline import DocumentIndexer, DocumentTransformer, IngestionPipeline, SessionFetcher
from .search import IndexManager


@dataclass(slots=True)
class PipelineResources:
    """Container bundling the objects needed to run the pipeline."""

    pipeline: IngestionPipeline
    storting_client: StortingClient
    search_client: Elasticsearch
    cache: CacheStore
    owns_client: bool = True
    owns_search_client: bool = True

    def close(self) -> None:
        if self.owns_client:
            self.storting_client.close()
        if self.owns_search_client:
            self.search_client.close()


def create_pipeline(
    config: AppConfig,
    *,
    storting_client: StortingClient | None = None,
    search_client: Elasticsearch | None = None,
    cache: CacheStore | None = None,
) -> PipelineResources:
    owns_client = storting_client is None
    owns_search_client = search_client is None
    client = storting_client or StortingClient(config.api)
    search = search_client or Elasticsearch(config.search.elasticsearch_url)
    cache_store = cache or FileCache(config.cache.data_dir)
    force = config.pipeline.force

    pipeline = IngestionPipeline(
        fetcher=SessionFetcher(
            client=client,
            cache=cache_store,
            force=force,
            refresh_listings=config.pipeline.refresh_listings,
        ),
        transformer=DocumentTransformer(cache=cache_store, force=force),
        index_manager=IndexManager(search),
        indexer=DocumentIndexer(client=search, cache=cache_store, index_name=config.search.index_name),
    )
    return PipelineResources(
        pipeline=pipeline,
        storting_client=client,
        search_client=search,
        cache=cache_store,
        owns_client=owns_client,
        owns_search_client=owns_search_client,
    )


__all__ = ["PipelineResources", "create_pipeline"]

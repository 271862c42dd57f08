"""Apache Solr index adapter."""

from rostersearch.adapters.solr.adapter import SolrAdapter

__all__ = ["SolrAdapter"]

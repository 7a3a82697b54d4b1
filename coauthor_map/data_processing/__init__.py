"""
데이터 전처리 모듈
Data Processing Module for the co-authorship map
"""

from .tsv_record_reader import TsvRecordReader, parse_citation_count, split_name_list
from .affiliation_parser import AffiliationParser, build_name_table
from .authorship_resolver import AuthorshipResolver, union_population
from .main import build_graph, run_complete_data_processing

__all__ = [
    "TsvRecordReader",
    "AffiliationParser",
    "AuthorshipResolver",
    "build_name_table",
    "union_population",
    "parse_citation_count",
    "split_name_list",
    "build_graph",
    "run_complete_data_processing",
]

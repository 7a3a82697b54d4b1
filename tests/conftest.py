import pytest

from coauthor_map.data_processing import build_graph, split_name_list
from coauthor_map.models import Record

HEADER = ["PT", "AU", "AF", "TI", "SO", "C1", "PY", "TC", "DI"]

CONFIG_ENV_VARS = ["INPUT_FILE", "OUTPUT_FILE", "SUBJECT_COUNTRY", "COAUTHOR_MAP_LOG_LEVEL"]


def make_record(authors, c1="", full_names=None, tc=0, title="Paper", year="2020", doi=""):
    """'A X; B Y' 형태 문자열로 Record 생성"""
    return Record(
        authors=split_name_list(authors),
        full_names=split_name_list(full_names) if full_names is not None else (),
        affiliation_text=c1,
        title=title,
        journal="Journal",
        year=year,
        doi=doi,
        citation_count=tc,
    )


@pytest.fixture
def record():
    return make_record


@pytest.fixture
def graph_from():
    def _build(records, marker="Japan"):
        return build_graph(records, subject_marker=marker)

    return _build


@pytest.fixture
def write_tsv(tmp_path):
    """헤더 + 행(dict) 목록을 BOM 포함 TSV로 저장"""

    def _write(rows, name="savedrecs.txt", header=HEADER, bom=True):
        lines = ["\t".join(header)]
        for row in rows:
            lines.append("\t".join(str(row.get(column, "")) for column in header))
        path = tmp_path / name
        prefix = "\ufeff" if bom else ""
        path.write_text(prefix + "\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """설정 관련 환경변수 제거 + 작업 디렉토리 격리"""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path

"""
Web of Science 탭 구분 export 파싱 모듈
Tab-separated bibliographic export reader
"""

import csv
import re
import warnings
import logging
import pandas as pd
from pathlib import Path
from tqdm import tqdm

from ..config_manager import ColumnsConfig
from ..models import Record

logger = logging.getLogger(__name__)

BOM = "\ufeff"
LIST_SEPARATOR = "; "

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def split_name_list(text):
    """'Smith J; Tanaka K' → ('Smith J', 'Tanaka K')"""
    if not text:
        return ()
    return tuple(part.strip() for part in text.split(LIST_SEPARATOR) if part.strip())


def parse_citation_count(text):
    """피인용 수 파싱 (실패 시 0)"""
    match = _LEADING_INT.match(text or "")
    if not match:
        return 0
    return max(0, int(match.group(1)))


class TsvRecordReader:
    """TSV export를 Record 목록으로 변환하는 클래스"""

    def __init__(self, columns=None):
        """
        Args:
            columns (ColumnsConfig): 컬럼명 매핑
        """
        self.columns = columns or ColumnsConfig()
        self.skipped_rows = []

    def load_dataframe(self, input_file):
        """TSV 파일을 문자열 DataFrame으로 로드"""
        input_file = Path(input_file)
        with open(input_file, "r", encoding="utf-8-sig", errors="replace", newline="") as f:
            header_line = f.readline()
        if not header_line.strip():
            logger.warning(f"⚠️ Empty input file: {input_file}")
            return pd.DataFrame()

        with warnings.catch_warnings():
            # 초과 필드를 버릴 때의 ParserWarning 무시
            warnings.simplefilter("ignore", pd.errors.ParserWarning)
            df = pd.read_csv(
                input_file,
                sep="\t",
                dtype=str,
                encoding="utf-8-sig",
                encoding_errors="replace",
                # 헤더보다 긴 행(끝의 탭 포함)은 초과 필드를 버림
                index_col=False,
                quoting=csv.QUOTE_NONE,
                keep_default_na=False,
                skip_blank_lines=True,
                engine="python",
            )
        df.columns = [str(c).lstrip(BOM).strip() for c in df.columns]
        return df.fillna("")

    def _check_columns(self, df):
        missing = [name for name in vars(self.columns).values() if name not in df.columns]
        if missing:
            logger.warning(f"⚠️ Missing columns (treated as empty): {missing}")

    def row_to_record(self, row, row_number):
        """DataFrame 한 행 → Record"""
        c = self.columns

        def get(column):
            value = row.get(column, "")
            return "" if value is None else str(value)

        return Record(
            authors=split_name_list(get(c.authors)),
            full_names=split_name_list(get(c.full_names)),
            affiliation_text=get(c.affiliations),
            title=get(c.title),
            journal=get(c.journal),
            year=get(c.year).strip(),
            doi=get(c.doi).strip(),
            citation_count=parse_citation_count(get(c.citations)),
            row_number=row_number,
        )

    def read(self, input_file):
        """전체 레코드 읽기 (행 단위 오류는 건너뜀)"""
        logger.info(f"🔍 Reading records from {input_file}")
        df = self.load_dataframe(input_file)
        self._check_columns(df)

        records = []
        self.skipped_rows = []
        for row_number, row in enumerate(
            tqdm(df.to_dict("records"), desc="Reading records", disable=None), start=1
        ):
            try:
                records.append(self.row_to_record(row, row_number))
            except Exception as e:
                logger.warning(f"⚠️ Skipping row {row_number}: {e}")
                self.skipped_rows.append(row_number)

        logger.info(f"📄 Loaded {len(records)} records")
        if self.skipped_rows:
            logger.warning(f"❌ Skipped {len(self.skipped_rows)} malformed rows")
        return records

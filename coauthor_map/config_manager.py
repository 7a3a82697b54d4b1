"""
공저 네트워크 설정 관리 모듈
기본값 → YAML → .env/환경변수 → 명시적 override 순으로 적용
"""

import os
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass, field, asdict, fields, is_dataclass
from enum import Enum

from dotenv import load_dotenv

# 로깅 설정
logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "coauthor_map.yaml"


class ConfigurationError(Exception):
    """필수 설정 누락 / 잘못된 설정"""


class ConfigSource(Enum):
    """설정 소스 우선순위"""

    DEFAULT = 1
    CONFIG_FILE = 2
    ENVIRONMENT = 3
    OVERRIDE = 4


@dataclass
class PathsConfig:
    """입출력 경로"""

    input_file: Optional[str] = None
    output_file: Optional[str] = None
    analysis_file: Optional[str] = None


@dataclass
class ColumnsConfig:
    """TSV 컬럼명 (Web of Science 태그)"""

    authors: str = "AU"
    full_names: str = "AF"
    affiliations: str = "C1"
    title: str = "TI"
    journal: str = "SO"
    year: str = "PY"
    doi: str = "DI"
    citations: str = "TC"


@dataclass
class AffiliationConfig:
    """대상 국가 판정 설정"""

    subject_marker: str = "Japan"


@dataclass
class ForceConfig:
    """개별 힘 파라미터"""

    link_distance: float = 80.0
    link_strength: float = 0.4
    charge_strength: float = -200.0
    charge_distance_min: float = 1.0
    charge_distance_max: float = 400.0
    collision_padding: float = 18.0
    collision_strength: float = 1.0
    separation_margin: float = 10.0
    separation_factor: float = 1.0
    position_strength: float = 0.03


@dataclass
class LayoutConfig:
    """시뮬레이션 설정"""

    width: float = 900.0
    height: float = 700.0
    size_metric: str = "papers"
    alpha: float = 1.0
    alpha_min: float = 0.001
    alpha_decay: Optional[float] = None  # None → 1 - alpha_min ** (1/300)
    velocity_decay: float = 0.4
    drag_alpha_target: float = 0.3
    max_ticks: int = 1000
    seed: int = 42
    forces: ForceConfig = field(default_factory=ForceConfig)

    def resolved_alpha_decay(self) -> float:
        if self.alpha_decay is not None:
            return self.alpha_decay
        return 1 - self.alpha_min ** (1 / 300)


@dataclass
class LoggingConfig:
    """로깅 설정"""

    level: str = "INFO"
    format: str = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
    log_file: Optional[str] = None


@dataclass
class CoauthorMapConfig:
    """전체 설정 - YAML 구조에 매칭"""

    paths: PathsConfig = field(default_factory=PathsConfig)
    columns: ColumnsConfig = field(default_factory=ColumnsConfig)
    affiliation: AffiliationConfig = field(default_factory=AffiliationConfig)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    config_source: ConfigSource = ConfigSource.DEFAULT

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["config_source"] = self.config_source.name
        return data


class CoauthorMapConfigManager:
    """설정 관리자"""

    # 환경변수 → (섹션, 키)
    ENV_MAPPING = {
        "INPUT_FILE": ("paths", "input_file"),
        "OUTPUT_FILE": ("paths", "output_file"),
        "SUBJECT_COUNTRY": ("affiliation", "subject_marker"),
        "COAUTHOR_MAP_LOG_LEVEL": ("logging", "level"),
    }

    # override 키 → (섹션, 키)
    OVERRIDE_MAPPING = {
        "input_file": ("paths", "input_file"),
        "output_file": ("paths", "output_file"),
        "analysis_file": ("paths", "analysis_file"),
        "subject_marker": ("affiliation", "subject_marker"),
        "size_metric": ("layout", "size_metric"),
        "width": ("layout", "width"),
        "height": ("layout", "height"),
        "max_ticks": ("layout", "max_ticks"),
        "log_level": ("logging", "level"),
    }

    def __init__(
        self,
        config_file: Optional[str] = None,
        env_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
        auto_load: bool = True,
    ):
        self.config_file = Path(config_file) if config_file else None
        self.env_file = Path(env_file) if env_file else None
        self.overrides = overrides or {}

        # 기본 설정으로 시작
        self.config = CoauthorMapConfig()

        if auto_load:
            self.load_all()

    def load_all(self) -> CoauthorMapConfig:
        """모든 설정 소스 로딩"""
        # 1. YAML 설정 파일
        if self.config_file is not None:
            if not self.config_file.exists():
                raise ConfigurationError(f"Config file not found: {self.config_file}")
            self._load_yaml_config_file(self.config_file)
        elif Path(DEFAULT_CONFIG_FILE).exists():
            self._load_yaml_config_file(Path(DEFAULT_CONFIG_FILE))

        # 2. .env + 환경변수
        self._load_environment_variables()

        # 3. 명시적 override (CLI)
        self._apply_overrides()

        logger.debug(f"🔧 Configuration loaded (source: {self.config.config_source.name})")
        return self.config

    def _load_yaml_config_file(self, config_path: Path) -> None:
        """YAML 설정 파일 로딩"""
        logger.info(f"📂 Loading YAML config: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)

        if not yaml_data:
            logger.warning("⚠️ Empty YAML file")
            return

        if not isinstance(yaml_data, dict):
            raise ConfigurationError(
                f"Config file must contain a mapping, got {type(yaml_data).__name__}"
            )

        for section_name, section_data in yaml_data.items():
            section = getattr(self.config, section_name, None)
            if section is None or not is_dataclass(section):
                logger.warning(f"⚠️ Unknown config section: {section_name}")
                continue
            self._apply_section(section, section_data or {}, section_name)

        self.config.config_source = ConfigSource.CONFIG_FILE

    def _apply_section(self, section, data: Dict[str, Any], path: str) -> None:
        """dict 값을 (중첩) dataclass에 적용"""
        known = {f.name for f in fields(section)}
        for key, value in data.items():
            if key not in known:
                logger.warning(f"⚠️ Unknown config key: {path}.{key}")
                continue
            current = getattr(section, key)
            if is_dataclass(current) and isinstance(value, dict):
                self._apply_section(current, value, f"{path}.{key}")
            else:
                setattr(section, key, value)

    def _load_environment_variables(self) -> None:
        """.env 파일 및 환경변수 로딩"""
        env_path = self.env_file or Path(".env")
        if env_path.exists():
            load_dotenv(env_path, override=False)
            logger.info(f"📂 Loaded .env file: {env_path}")

        for env_name, (section_name, key) in self.ENV_MAPPING.items():
            value = os.getenv(env_name)
            if value:
                setattr(getattr(self.config, section_name), key, value)
                self.config.config_source = ConfigSource.ENVIRONMENT
                logger.debug(f"🌍 {env_name} → {section_name}.{key}")

    def _apply_overrides(self) -> None:
        for key, value in self.overrides.items():
            if value is None:
                continue
            if key not in self.OVERRIDE_MAPPING:
                raise ConfigurationError(f"Unknown override: {key}")
            section_name, attr = self.OVERRIDE_MAPPING[key]
            setattr(getattr(self.config, section_name), attr, value)
            self.config.config_source = ConfigSource.OVERRIDE

    def validate(self, require_output: bool = True) -> None:
        """빌드 실행 전 필수 설정 검증 (실패 시 아무것도 쓰지 않음)"""
        paths = self.config.paths
        missing = []
        if not paths.input_file:
            missing.append("input_file (INPUT_FILE)")
        if require_output and not paths.output_file:
            missing.append("output_file (OUTPUT_FILE)")
        if missing:
            raise ConfigurationError(
                "Missing required configuration: " + ", ".join(missing)
            )

        if not Path(paths.input_file).is_file():
            raise ConfigurationError(f"Input file not found: {paths.input_file}")

        if not self.config.affiliation.subject_marker:
            raise ConfigurationError("subject_marker must be a non-empty string")


def load_config(
    config_file: Optional[str] = None,
    env_file: Optional[str] = None,
    **overrides,
) -> CoauthorMapConfig:
    """설정 로딩 + 검증 편의 함수"""
    manager = CoauthorMapConfigManager(
        config_file=config_file, env_file=env_file, overrides=overrides
    )
    manager.validate()
    return manager.config

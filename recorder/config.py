"""Application configuration loaded from the XDG config directory."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from recorder.prompt_vars import PromptVarsConfig, default_prompt_vars, merge_prompt_vars
from recorder.prompts import PromptPathsConfig, Prompts, resolve_prompts

DEFAULT_WHISPER_URL = "http://localhost:8178/v1/audio/transcriptions"
DEFAULT_LLM_URL = "http://localhost:8179/v1/chat/completions"


@dataclass
class WhisperConfig:
    """Whisper server connection settings."""

    url: str = ""
    timeout_s: int = 0


@dataclass
class LLMConfig:
    """LLM server connection settings."""

    url: str = ""
    model: str = ""
    timeout_s: int = 0


@dataclass
class TranscriptConfig:
    """Transcript output settings."""

    output_dir: str = ""


@dataclass
class SegmentsConfig:
    """Segment file output settings."""

    output_dir: str = ""


@dataclass
class DedupConfig:
    """Audio deduplication settings."""

    threshold: float = 0.0


@dataclass
class SignalsConfig:
    """Signal detection settings."""

    silence_threshold_s: int = 0
    cdp_ports: list[int] = field(default_factory=list)


@dataclass
class SpeakerConfig:
    """Speaker attribution settings."""

    ambiguity_ratio: float = 0.0


@dataclass
class LogConfig:
    """Logging settings; an empty file disables file logging."""

    file: str = ""


@dataclass
class Config:
    """Top-level application configuration."""

    whisper: WhisperConfig = field(default_factory=WhisperConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    transcript: TranscriptConfig = field(default_factory=TranscriptConfig)
    segments: SegmentsConfig = field(default_factory=SegmentsConfig)
    dedup: DedupConfig = field(default_factory=DedupConfig)
    signals: SignalsConfig = field(default_factory=SignalsConfig)
    speaker: SpeakerConfig = field(default_factory=SpeakerConfig)
    log: LogConfig = field(default_factory=LogConfig)
    prompt_paths: PromptPathsConfig = field(default_factory=PromptPathsConfig)
    prompt_vars: PromptVarsConfig = field(default_factory=PromptVarsConfig)
    prompts: Prompts = field(default_factory=Prompts)


def defaults() -> Config:
    """Return the built-in configuration."""
    data = data_dir()
    return Config(
        whisper=WhisperConfig(url=DEFAULT_WHISPER_URL, timeout_s=60),
        llm=LLMConfig(url=DEFAULT_LLM_URL, model="default", timeout_s=180),
        transcript=TranscriptConfig(output_dir=os.path.join(data, "recorder", "transcripts")),
        segments=SegmentsConfig(output_dir=os.path.join(data, "recorder", "segments")),
        dedup=DedupConfig(threshold=0.6),
        signals=SignalsConfig(silence_threshold_s=180, cdp_ports=[]),
        speaker=SpeakerConfig(ambiguity_ratio=0.05),
        prompt_vars=default_prompt_vars(),
    )


def _section(value: Any, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"config: {key}: expected an object")
    return value


def _value(section: dict[str, Any], key: str, kind: type, current: Any) -> Any:
    value = section.get(key)
    if value is None:
        return current
    if kind is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"config: {key}: expected a number")
        return float(value)
    if isinstance(value, bool) != (kind is bool) or not isinstance(value, kind):
        raise ValueError(f"config: {key}: expected {kind.__name__}")
    return value


def _apply_json(cfg: Config, raw: Any) -> Config:
    data = _section(raw, "config")

    whisper = _section(data.get("whisper"), "whisper")
    llm = _section(data.get("llm"), "llm")
    transcript = _section(data.get("transcript"), "transcript")
    segments = _section(data.get("segments"), "segments")
    dedup = _section(data.get("dedup"), "dedup")
    signals = _section(data.get("signals"), "signals")
    speaker = _section(data.get("speaker"), "speaker")
    log = _section(data.get("log"), "log")
    prompts = _section(data.get("prompts"), "prompts")

    ports = signals.get("cdpPorts")
    if ports is None:
        ports = list(cfg.signals.cdp_ports)
    elif not isinstance(ports, list) or any(isinstance(p, bool) or not isinstance(p, int) for p in ports):
        raise ValueError("config: cdpPorts: expected a list of integers")

    prompt_vars = cfg.prompt_vars
    if data.get("promptVars") is not None:
        prompt_vars = PromptVarsConfig.from_dict(_section(data["promptVars"], "promptVars"))

    return replace(
        cfg,
        whisper=WhisperConfig(
            url=_value(whisper, "url", str, cfg.whisper.url),
            timeout_s=_value(whisper, "timeoutS", int, cfg.whisper.timeout_s),
        ),
        llm=LLMConfig(
            url=_value(llm, "url", str, cfg.llm.url),
            model=_value(llm, "model", str, cfg.llm.model),
            timeout_s=_value(llm, "timeoutS", int, cfg.llm.timeout_s),
        ),
        transcript=TranscriptConfig(output_dir=_value(transcript, "outputDir", str, cfg.transcript.output_dir)),
        segments=SegmentsConfig(output_dir=_value(segments, "outputDir", str, cfg.segments.output_dir)),
        dedup=DedupConfig(threshold=_value(dedup, "threshold", float, cfg.dedup.threshold)),
        signals=SignalsConfig(
            silence_threshold_s=_value(signals, "silenceThresholdS", int, cfg.signals.silence_threshold_s),
            cdp_ports=list(ports),
        ),
        speaker=SpeakerConfig(ambiguity_ratio=_value(speaker, "ambiguityRatio", float, cfg.speaker.ambiguity_ratio)),
        log=LogConfig(file=_value(log, "file", str, cfg.log.file)),
        prompt_paths=PromptPathsConfig(
            cleanup=_value(prompts, "cleanup", str, cfg.prompt_paths.cleanup),
            summarize=_value(prompts, "summarize", str, cfg.prompt_paths.summarize),
            combine=_value(prompts, "combine", str, cfg.prompt_paths.combine),
        ),
        prompt_vars=prompt_vars,
    )


def load() -> Config:
    """Read ``recorder/config.json`` from the config directory over the defaults.

    A missing file yields the defaults; malformed content raises ValueError.
    """
    cfg = defaults()
    path = Path(config_dir()) / "recorder" / "config.json"
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return finalize(cfg)
    return finalize(_apply_json(cfg, json.loads(text)))


def finalize(cfg: Config) -> Config:
    """Expand home-relative paths, fill prompt variables and resolve prompts."""
    prompt_paths = PromptPathsConfig(
        cleanup=expand_home(cfg.prompt_paths.cleanup),
        summarize=expand_home(cfg.prompt_paths.summarize),
        combine=expand_home(cfg.prompt_paths.combine),
    )
    prompt_vars = merge_prompt_vars(cfg.prompt_vars, default_prompt_vars())
    return replace(
        cfg,
        transcript=replace(cfg.transcript, output_dir=expand_home(cfg.transcript.output_dir)),
        segments=replace(cfg.segments, output_dir=expand_home(cfg.segments.output_dir)),
        log=replace(cfg.log, file=expand_home(cfg.log.file)),
        prompt_paths=prompt_paths,
        prompt_vars=prompt_vars,
        prompts=resolve_prompts(prompt_paths, prompt_vars),
    )


def expand_home(path: str) -> str:
    """Replace a leading ``~/`` with the home directory."""
    if path.startswith("~/"):
        return os.path.normpath(os.path.join(home_dir(), path[2:]))
    return path


def home_dir() -> str:
    """Return the user's home directory, or an empty string if unknown."""
    try:
        return str(Path.home())
    except RuntimeError:
        return ""


def config_dir() -> str:
    """Return the XDG config directory."""
    return env_dir("XDG_CONFIG_HOME", os.path.join(home_dir(), ".config"))


def data_dir() -> str:
    """Return the XDG data directory."""
    return env_dir("XDG_DATA_HOME", os.path.join(home_dir(), ".local", "share"))


def env_dir(name: str, fallback: str) -> str:
    """Return the absolute directory in environment variable ``name``, else ``fallback``."""
    directory = expand_home(os.environ.get(name, ""))
    if directory and os.path.isabs(directory):
        return directory
    return fallback
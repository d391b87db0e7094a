from pathlib import Path

import pytest

from dirsample.config import SampleConfig, build_config, load_config


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_load_config_defaults(tmp_path: Path):
    cfg = load_config(
        _write(tmp_path / "c.yaml", "input_dir: data\noutput_dir: out\nsample_size: 3\n")
    )
    assert cfg == SampleConfig(input_dir=Path("data"), output_dir=Path("out"), sample_size=3)
    assert cfg.short_stratum == "pad"
    assert cfg.on_copy_error == "abort"
    assert cfg.overwrite is True


def test_load_config_all_keys(tmp_path: Path):
    cfg = load_config(
        _write(
            tmp_path / "c.yaml",
            "\n".join(
                [
                    "input_dir: data",
                    "output_dir: out",
                    "sample_size: 0",
                    "short_stratum: STRICT",
                    "on_copy_error: collect",
                    "overwrite: false",
                    "seed: 5",
                    "workers: 3",
                    "manifest: out.manifest.json",
                ]
            ),
        )
    )
    assert cfg.short_stratum == "strict"
    assert cfg.on_copy_error == "collect"
    assert cfg.overwrite is False
    assert cfg.seed == 5
    assert cfg.workers == 3
    assert cfg.manifest_path == Path("out.manifest.json")


@pytest.mark.parametrize(
    "body, key",
    [
        ("- a\n- b\n", "mapping"),
        ("output_dir: out\nsample_size: 3\n", "input_dir"),
        ("input_dir: d\noutput_dir: out\n", "sample_size"),
        ("input_dir: d\noutput_dir: out\nsample_size: -1\n", "sample_size"),
        ("input_dir: d\noutput_dir: out\nsample_size: true\n", "sample_size"),
        ("input_dir: d\noutput_dir: out\nsample_size: 1\nshort_stratum: drop\n", "short_stratum"),
        ("input_dir: d\noutput_dir: out\nsample_size: 1\nworkers: 0\n", "workers"),
        ("input_dir: d\noutput_dir: out\nsample_size: 1\noverwrite: yes please\n", "overwrite"),
    ],
)
def test_load_config_rejects_invalid(tmp_path: Path, body: str, key: str):
    with pytest.raises(ValueError, match=key):
        load_config(_write(tmp_path / "c.yaml", body))


def test_load_config_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.yaml")


def test_build_config_from_flags():
    cfg = build_config(input_dir=Path("in"), output_dir=Path("out"), sample_size=2, seed=1)
    assert cfg.sample_size == 2
    assert cfg.seed == 1


def test_build_config_requires_flags_without_file():
    with pytest.raises(ValueError, match="--num"):
        build_config(input_dir=Path("in"), output_dir=Path("out"))


def test_flags_override_file(tmp_path: Path):
    path = _write(
        tmp_path / "c.yaml",
        "input_dir: data\noutput_dir: out\nsample_size: 3\nshort_stratum: strict\n",
    )
    cfg = build_config(config_path=path, sample_size=0, short_stratum="PAD", overwrite=False)
    assert cfg.input_dir == Path("data")
    assert cfg.sample_size == 0
    assert cfg.short_stratum == "pad"
    assert cfg.overwrite is False


def test_build_config_validates_overrides():
    with pytest.raises(ValueError, match="on_copy_error"):
        build_config(
            input_dir=Path("in"), output_dir=Path("out"), sample_size=1, on_copy_error="retry"
        )

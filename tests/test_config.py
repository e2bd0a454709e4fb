from __future__ import annotations

from pathlib import Path

import pytest

from traitsmith.core.config import IndexConfig, load_config
from traitsmith.core.exceptions import ConfigError


def test_defaults() -> None:
    config = IndexConfig(docs_root=Path("site"))
    assert config.fragment_root == Path("site") / "trait.impl"
    assert config.strict is False
    assert config.initialize is True


def test_load_config_resolves_relative_root(tmp_path: Path) -> None:
    config_file = tmp_path / "index.yml"
    config_file.write_text(
        "docs_root: target/doc\nroot_path: ../\nstrict: true\n", encoding="utf-8"
    )

    config = load_config(config_file)

    assert config.docs_root == (tmp_path / "target" / "doc").resolve()
    assert config.root_path == "../"
    assert config.strict is True


def test_load_config_applies_overrides(tmp_path: Path) -> None:
    config_file = tmp_path / "index.yml"
    config_file.write_text("docs_root: /srv/doc\n", encoding="utf-8")

    config = load_config(config_file, fragment_dir="/implementors/")

    assert config.fragment_dir == "implementors"


@pytest.mark.parametrize(
    "content",
    [
        "docs_root: doc\nunknown: 1\n",
        "fragment_dir: x\n",
        "- docs_root\n",
        "docs_root: [unclosed\n",
        "docs_root: doc\nfragment_dir: '/'\n",
    ],
)
def test_invalid_configuration(tmp_path: Path, content: str) -> None:
    config_file = tmp_path / "index.yml"
    config_file.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(config_file)


def test_missing_configuration_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path / "absent.yml")

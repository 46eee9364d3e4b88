from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from ruamel.yaml import YAML

from .config import Settings, load_settings
from .errors import NanoUserError
from .template import node_to_dict, parse, render_sync
from .version import tool_version

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="nano",
        description="nano template engine",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument(
        "--verbose",
        action="store_true",
        help="отладочный лог в stderr",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_render = sub.add_parser("render", help="Рендеринг шаблона в stdout")
    sp_render.add_argument("template", help="путь к файлу шаблона")
    sp_render.add_argument(
        "--data",
        metavar="FILE",
        help="контекст данных: YAML или JSON файл со словарем",
    )
    sp_render.add_argument(
        "--import-dir",
        metavar="DIR",
        help="каталог для {import ...} (по умолчанию из конфига или каталог шаблона)",
    )
    sp_render.add_argument(
        "--config",
        metavar="FILE",
        help="YAML-файл с настройками рендеринга",
    )

    sp_parse = sub.add_parser("parse", help="AST шаблона (JSON)")
    sp_parse.add_argument("template", help="путь к файлу шаблона")

    return p


def _read_text(path: Path, what: str) -> str:
    if not path.is_file():
        raise ValueError(f"{what} not found: {path}")
    return path.read_text(encoding="utf-8")


def _load_data(data_arg: Optional[str]) -> Dict[str, Any]:
    """Читает контекст данных; JSON является подмножеством YAML и читается тем же загрузчиком."""
    if not data_arg:
        return {}

    raw = YAML(typ="safe").load(_read_text(Path(data_arg), "Data file")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Data file must contain a mapping: {data_arg}")
    return raw


def _settings(ns: argparse.Namespace, template_path: Path) -> Settings:
    """
    Настройки рендеринга в порядке приоритета:
    --import-dir, затем --config, затем каталог шаблона.
    """
    settings = Settings()
    if ns.config:
        config_path = Path(ns.config)
        if not config_path.is_file():
            raise ValueError(f"Config file not found: {config_path}")
        settings = load_settings(config_path)

    if ns.import_dir is not None:
        return Settings(import_directory=ns.import_dir)

    if not settings.import_directory:
        return Settings(import_directory=template_path.parent.as_posix())

    return settings


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)

    if ns.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )

    try:
        template_path = Path(ns.template)
        template = _read_text(template_path, "Template file")

        if ns.cmd == "render":
            data = _load_data(ns.data)
            settings = _settings(ns, template_path)
            logger.debug(f"Rendering {template_path} with {settings}")
            sys.stdout.write(render_sync(template, data, settings))
            return 0

        if ns.cmd == "parse":
            ast = parse(template)
            sys.stdout.write(json.dumps(node_to_dict(ast), ensure_ascii=False, indent=2) + "\n")
            return 0

    except NanoUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())

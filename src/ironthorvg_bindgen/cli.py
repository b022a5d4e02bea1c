from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .common import read_text, write_artifact_if_changed, write_json
from .config import GeneratorConfig, load_config
from .emitters import render_all
from .errors import BindgenError
from .model import HeaderModel
from .parser import parse_header


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ironthorvg-bindgen",
        description="Generate IronThorVG C# interop declarations from the ThorVG C API header.",
    )
    parser.add_argument("--header", help="Path to the ThorVG C API header (thorvg_capi.h).")
    parser.add_argument("--output", help="Directory that receives the generated .g.cs files.")
    parser.add_argument("--config", help="Optional JSON config overriding naming, type and output defaults.")
    parser.add_argument("--model-output", help="Optional path for a JSON dump of the parsed header model.")
    parser.add_argument("--check", action="store_true", help="Fail if generated files would change.")
    parser.add_argument("--dry-run", action="store_true", help="Render without writing files.")
    return parser


def run_generation(
    header_path: Path,
    output_dir: Path,
    config: GeneratorConfig,
    *,
    check: bool = False,
    dry_run: bool = False,
    model_output: Path | None = None,
) -> int:
    label = header_path.name
    model = parse_header(read_text(header_path), config)
    counts = model.counts()
    print(
        f"[{label}] parsed: enums={counts['enums']} structs={counts['structs']} "
        f"handles={counts['handles']} functions={counts['functions']}"
    )

    # Render everything before touching the output directory.
    artifacts = render_all(model, config)

    drift = False
    for file_name, content in artifacts.items():
        status, diff = write_artifact_if_changed(
            path=output_dir / file_name,
            content=content,
            dry_run=dry_run,
            check=check,
        )
        print(f"[{label}] {file_name}: {status}")
        if status == "drift":
            drift = True
            if diff:
                print(diff)

    if model_output is not None and not check and not dry_run:
        write_model(model, model_output)

    return 1 if drift else 0


def write_model(model: HeaderModel, path: Path) -> None:
    write_json(path, model.as_dict())


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    raw_args = sys.argv[1:] if argv is None else argv
    if not raw_args:
        parser.print_help()
        return 0

    args = parser.parse_args(raw_args)
    if not args.header or not args.output:
        print("Missing required arguments: --header and --output", file=sys.stderr)
        return 1

    try:
        config = load_config(Path(args.config) if args.config else None)
        return run_generation(
            Path(args.header),
            Path(args.output),
            config,
            check=bool(args.check),
            dry_run=bool(args.dry_run),
            model_output=Path(args.model_output) if args.model_output else None,
        )
    except BindgenError as exc:
        print(f"ironthorvg_bindgen error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())

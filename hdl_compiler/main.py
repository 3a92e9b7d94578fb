"""Entry-point for the markup → binary compile pipeline."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional

from hdl_compiler.compiler import CompileResult, HDLCompiler
from hdl_compiler.utils.debug import DebugDumper
from hdl_compiler.utils.file_access import FileReader
from hdl_compiler.utils.logger import get_logger, set_verbose

LOGGER = get_logger(__name__)

OUTPUT_SUFFIX = ".bin"


def compile_file(source_file: Path, output_file: Optional[Path] = None, debug_dir: Optional[Path] = None) -> CompileResult:
    """Compile ``source_file`` and write the binary next to it unless told otherwise."""
    source_path = Path(source_file).resolve()
    compiler = HDLCompiler(FileReader(source_path.parent))

    LOGGER.info("Compiling %s", source_path.name)
    loaded = compiler.load(source_path.name)
    if not loaded.ok:
        return loaded

    if debug_dir is not None and compiler.document is not None:
        DebugDumper(Path(debug_dir)).dump(compiler.document)

    result = compiler.compile()
    if not result.ok:
        return result

    output_path = Path(output_file) if output_file is not None else source_path.with_suffix(OUTPUT_SUFFIX)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(result.data)
    LOGGER.info("Wrote %d bytes to %s", len(result.data), output_path)
    return result


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Compile HDL markup into the binary UI format")
    parser.add_argument("source_file", help="Path to the markup source")
    parser.add_argument("--output", help="Path of the binary to write (defaults to the source with a .bin suffix)")
    parser.add_argument("--debug-dir", help="Directory to dump the built document model as JSON")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    set_verbose(args.verbose)
    source = Path(args.source_file)
    if not source.is_file():
        LOGGER.error("Source file not found: %s", source)
        return 1

    result = compile_file(
        source,
        Path(args.output) if args.output else None,
        Path(args.debug_dir) if args.debug_dir else None,
    )
    if not result.ok:
        LOGGER.error("Compilation failed: %s", result.error)
        return 1
    return 0


def cli() -> None:  # pragma: no cover
    raise SystemExit(main())


if __name__ == "__main__":  # pragma: no cover
    cli()

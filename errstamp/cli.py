# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
errstamp command line driver.

`stamp` parses JavaScript files, runs the error-code pass over each one and
prints or writes the rewritten sources. `explain` maps a code back to the
registry entry it was generated from.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from errstamp.core.diagnostics import Diagnostic
from errstamp.parser import parse_source
from errstamp.printer import format_program
from errstamp.transform.config import DEFAULT_REGISTRY_DIR, MODES, TransformConfig
from errstamp.transform.errors import ConfigurationError
from errstamp.transform.registry import find_entry_for_code
from errstamp.transform.rewriter import run_error_code_pass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StampOptions:
	sources: list[Path]
	root: Path
	commit_hash: str | None = None
	mode: str | None = None
	registry_dir: Path | None = None
	dry_run: bool = False
	out_dir: Path | None = None
	in_place: bool = False
	jobs: int = 1
	config_json: str | None = None


@dataclass(frozen=True)
class ExplainOptions:
	code: str
	registry_dir: Path = DEFAULT_REGISTRY_DIR


def _build_parser() -> argparse.ArgumentParser:
	p = argparse.ArgumentParser(prog="errstamp", description="Stable error codes for JavaScript error sites")
	sub = p.add_subparsers(dest="cmd", required=True)

	stamp = sub.add_parser("stamp", help="Attach error codes to `new Error(...)` sites")
	stamp.add_argument("sources", type=Path, nargs="+", help="JavaScript source files")
	stamp.add_argument("--commit", dest="commit_hash", type=str, default=None, help="Commit identifier embedded in every code")
	stamp.add_argument("--mode", type=str, default=None, help=f"Registry mode: {' or '.join(MODES)}")
	stamp.add_argument(
		"--registry-dir",
		type=Path,
		default=None,
		help="Registry directory (default: ./error_codes)",
	)
	stamp.add_argument(
		"--root",
		type=Path,
		default=Path("."),
		help="Directory file paths are recorded relative to (default: .)",
	)
	stamp.add_argument("--dry-run", action="store_true", help="Compute codes without touching the registry")
	dest = stamp.add_mutually_exclusive_group()
	dest.add_argument("--out-dir", type=Path, default=None, help="Write rewritten files under this directory")
	dest.add_argument("--in-place", action="store_true", help="Overwrite the source files")
	stamp.add_argument("--jobs", type=int, default=1, help="Worker processes (default: 1)")
	stamp.add_argument(
		"--config",
		dest="config_json",
		type=str,
		default=None,
		help='Plugin style JSON config ({"commitHash", "mode", "registryDir", "dryRun"}); flags override',
	)
	stamp.add_argument("--json", action="store_true", help="Emit machine-readable JSON")
	stamp.add_argument("--verbose", action="store_true", help="Log registry activity and every rewritten site")

	explain = sub.add_parser("explain", help="Show the message recorded for an error code")
	explain.add_argument("code", type=str, help="Error code (E<commit><hash>)")
	explain.add_argument(
		"--registry-dir",
		type=Path,
		default=DEFAULT_REGISTRY_DIR,
		help="Registry directory (default: ./error_codes)",
	)
	explain.add_argument("--json", action="store_true", help="Emit machine-readable JSON")
	explain.add_argument("--verbose", action="store_true", help="Log registry lookups")
	return p


def logical_path(source: Path, root: Path) -> str:
	"""Path recorded in the registry: relative to `root`, POSIX separators."""
	resolved = source.resolve()
	try:
		return resolved.relative_to(root.resolve()).as_posix()
	except ValueError:
		return resolved.as_posix()


def build_configs(opts: StampOptions) -> list[TransformConfig]:
	base: dict[str, Any] = {}
	if opts.config_json is not None:
		try:
			decoded = json.loads(opts.config_json)
		except json.JSONDecodeError as err:
			raise ConfigurationError(
				reason_code="E-CONFIG-INVALID",
				message=f"--config is not valid JSON: {err}",
			) from err
		if not isinstance(decoded, dict):
			raise ConfigurationError(reason_code="E-CONFIG-INVALID", message="--config must be a JSON object")
		base.update(decoded)
	if opts.commit_hash is not None:
		base["commitHash"] = opts.commit_hash
	if opts.mode is not None:
		base["mode"] = opts.mode
	if opts.registry_dir is not None:
		base["registryDir"] = str(opts.registry_dir)
	if opts.dry_run:
		base["dryRun"] = True
	configs = []
	for source in opts.sources:
		data = dict(base)
		data["filePath"] = logical_path(source, opts.root)
		configs.append(TransformConfig.from_mapping(data))
	return configs


def stamp_file(source: str, config: dict[str, Any]) -> dict[str, Any]:
	"""
	Process one file: parse, run the pass, print.

	Runs in worker processes, so inputs and the result are plain data. On any
	failure `output` is None and `diagnostics` explains why.
	"""
	cfg = TransformConfig.from_mapping(config)
	outcome: dict[str, Any] = {
		"source": source,
		"file_path": cfg.file_path,
		"output": None,
		"codes": [],
		"diagnostics": [],
	}
	try:
		text = Path(source).read_text(encoding="utf-8")
	except OSError as err:
		diag = Diagnostic(message=f"cannot read source: {err}", code="E-SOURCE-READ", phase="config")
		outcome["diagnostics"] = [_diag_entry(diag, source)]
		return outcome
	program, diags = parse_source(text, filename=source)
	if program is None:
		outcome["diagnostics"] = [_diag_entry(d, source) for d in diags]
		return outcome
	result = run_error_code_pass(program, cfg)
	if not result.ok:
		outcome["diagnostics"] = [_diag_entry(d, source) for d in result.diagnostics()]
		return outcome
	outcome["output"] = format_program(result.program)
	outcome["codes"] = [c.to_dict() for c in result.codes]
	return outcome


def _diag_entry(diag: Diagnostic, source: str) -> dict[str, Any]:
	obj = diag.to_dict(default_file=source)
	obj["human"] = diag.format_human(default_file=source)
	return obj


def _run_stamp(opts: StampOptions, configs: list[TransformConfig]) -> list[dict[str, Any]]:
	jobs = [(str(src), cfg.to_dict()) for src, cfg in zip(opts.sources, configs)]
	if opts.jobs > 1 and len(jobs) > 1:
		with ProcessPoolExecutor(max_workers=opts.jobs) as pool:
			futures = [pool.submit(stamp_file, src, cfg) for src, cfg in jobs]
			return [f.result() for f in futures]
	outcomes = []
	for src, cfg in jobs:
		outcome = stamp_file(src, cfg)
		outcomes.append(outcome)
		if outcome["diagnostics"]:
			break
	return outcomes


def _write_text_atomic(path: Path, text: str) -> None:
	path.parent.mkdir(parents=True, exist_ok=True)
	tmp = path.with_name(path.name + f".tmp.{os.getpid()}")
	try:
		tmp.write_text(text, encoding="utf-8")
		os.replace(tmp, path)
	except OSError:
		tmp.unlink(missing_ok=True)
		raise


def _emit(opts: StampOptions, outcomes: list[dict[str, Any]]) -> None:
	if opts.in_place:
		for o in outcomes:
			_write_text_atomic(Path(o["source"]), o["output"])
		return
	if opts.out_dir is not None:
		for o in outcomes:
			_write_text_atomic(opts.out_dir / o["file_path"].lstrip("/"), o["output"])


def stamp_v0(opts: StampOptions, as_json: bool = False) -> int:
	try:
		configs = build_configs(opts)
	except ConfigurationError as err:
		diag = Diagnostic(message=err.message, code=err.reason_code, phase="config")
		_report(as_json, 1, [], [_diag_entry(diag, "<config>")])
		return 1

	outcomes = _run_stamp(opts, configs)
	diagnostics = [d for o in outcomes for d in o["diagnostics"]]
	if diagnostics:
		_report(as_json, 1, [], diagnostics)
		return 1

	_emit(opts, outcomes)
	files = []
	for o in outcomes:
		entry = {"source": o["source"], "file_path": o["file_path"], "codes": o["codes"]}
		if not opts.in_place and opts.out_dir is None:
			entry["output"] = o["output"]
		files.append(entry)
	if as_json:
		_report(True, 0, files, [])
	elif not opts.in_place and opts.out_dir is None:
		for o in outcomes:
			if len(outcomes) > 1:
				print(f"// {o['file_path']}")
			sys.stdout.write(o["output"])
	logger.info("stamped %d file(s), %d code(s)", len(outcomes), sum(len(o["codes"]) for o in outcomes))
	return 0


def _report(as_json: bool, exit_code: int, files: list[dict[str, Any]], diagnostics: list[dict[str, Any]]) -> None:
	if as_json:
		payload = {
			"exit_code": exit_code,
			"files": files,
			"diagnostics": [{k: v for k, v in d.items() if k != "human"} for d in diagnostics],
		}
		print(json.dumps(payload, sort_keys=True, separators=(",", ":")))
		return
	for d in diagnostics:
		print(d["human"], file=sys.stderr)


def explain_v0(opts: ExplainOptions, as_json: bool = False) -> int:
	try:
		found = find_entry_for_code(opts.registry_dir, opts.code)
	except ValueError as err:
		print(f"errstamp: malformed registry entry for {opts.code}: {err}", file=sys.stderr)
		return 1
	if found is None:
		if as_json:
			print(json.dumps({"code": opts.code, "found": False}, sort_keys=True, separators=(",", ":")))
		else:
			print(f"errstamp: unknown error code {opts.code} (registry: {opts.registry_dir})", file=sys.stderr)
		return 1
	key, record = found
	if as_json:
		obj = {"code": opts.code, "found": True, "key": key}
		obj.update(record.to_dict())
		print(json.dumps(obj, sort_keys=True, separators=(",", ":")))
	else:
		print(f"{opts.code}: {record.error_message}")
		print(f"  file: {record.file_path}")
		print(f"  occurrence: {record.occurrence_count}")
		print(f"  key: {key}")
	return 0


def main(argv: list[str] | None = None) -> int:
	p = _build_parser()
	args = p.parse_args(argv)
	logging.basicConfig(
		level=logging.DEBUG if args.verbose else logging.WARNING,
		format="%(levelname)s %(name)s: %(message)s",
	)

	if args.cmd == "stamp":
		if args.jobs < 1:
			p.error("--jobs must be >= 1")
		opts = StampOptions(
			sources=list(args.sources),
			root=args.root,
			commit_hash=args.commit_hash,
			mode=args.mode,
			registry_dir=args.registry_dir,
			dry_run=bool(args.dry_run),
			out_dir=args.out_dir,
			in_place=bool(args.in_place),
			jobs=args.jobs,
			config_json=args.config_json,
		)
		return stamp_v0(opts, as_json=bool(args.json))

	if args.cmd == "explain":
		opts = ExplainOptions(code=args.code, registry_dir=args.registry_dir)
		return explain_v0(opts, as_json=bool(args.json))

	raise AssertionError("unreachable")


if __name__ == "__main__":
	raise SystemExit(main())

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from json_salvage.config import EnvSettings, load_client_config
from json_salvage.extraction import JSONExtractError, extract_json, repair_json
from json_salvage.logging import configure_logging
from json_salvage.openai_client import ChatCompletionsClient, request_json


def _read_input(path: str | None) -> str:
    if path and path != "-":
        return Path(path).read_text(encoding="utf-8", errors="replace")
    return sys.stdin.read()


def _dump(value: object, indent: int | None) -> str:
    return json.dumps(value, ensure_ascii=False, indent=indent)


def _cmd_extract(args: argparse.Namespace) -> None:
    env = EnvSettings()
    configure_logging(env.log_level, debug_extraction=args.debug)
    result = extract_json(_read_input(args.file), expect_array=args.array)
    if result is None:
        shape = "array" if args.array else "object"
        print(f"No valid JSON {shape} found", file=sys.stderr)
        raise SystemExit(1)
    print(_dump(result, args.indent))


def _cmd_repair(args: argparse.Namespace) -> None:
    env = EnvSettings()
    configure_logging(env.log_level)
    print(repair_json(_read_input(args.file)))


async def _ask(prompt: str, *, env: EnvSettings, model: str | None, expect_array: bool) -> object:
    cfg = load_client_config(env, model=model)
    client = ChatCompletionsClient.from_config(cfg)
    try:
        return await request_json(
            client,
            messages=[{"role": "user", "content": prompt}],
            model=cfg.model,
            expect_array=expect_array,
            attempts=cfg.max_attempts,
            temperature=cfg.temperature,
        )
    finally:
        await client.aclose()


def _cmd_ask(args: argparse.Namespace) -> None:
    env = EnvSettings()
    configure_logging(env.log_level, debug_extraction=args.debug)
    if not env.openai_api_key:
        raise SystemExit("OPENAI_API_KEY required for ask")
    try:
        result = asyncio.run(_ask(args.prompt, env=env, model=args.model, expect_array=args.array))
    except JSONExtractError as e:
        print(f"Model reply contained no usable JSON: {e}", file=sys.stderr)
        raise SystemExit(1)
    print(_dump(result, args.indent))


def main(argv: list[str] | None = None) -> None:
    p = argparse.ArgumentParser(prog="json-salvage")
    sub = p.add_subparsers(dest="cmd", required=True)

    pe = sub.add_parser("extract", help="Extract the JSON object (or array) embedded in text.")
    pe.add_argument("file", nargs="?", default=None, help="Input file (default: stdin).")
    pe.add_argument("--array", action="store_true", help="Expect a JSON array instead of an object.")
    pe.add_argument("--indent", type=int, default=2)
    pe.add_argument("--debug", action="store_true", help="Log which extraction stage matched.")
    pe.set_defaults(func=_cmd_extract)

    pr = sub.add_parser("repair", help="Print the heuristic repair of near-miss JSON text.")
    pr.add_argument("file", nargs="?", default=None, help="Input file (default: stdin).")
    pr.set_defaults(func=_cmd_repair)

    pa = sub.add_parser("ask", help="Prompt the model and print the JSON in its reply (re-prompts on a miss).")
    pa.add_argument("prompt", type=str)
    pa.add_argument("--array", action="store_true")
    pa.add_argument("--model", type=str, default=None)
    pa.add_argument("--indent", type=int, default=2)
    pa.add_argument("--debug", action="store_true")
    pa.set_defaults(func=_cmd_ask)

    args = p.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()

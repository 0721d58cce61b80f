from __future__ import annotations

import argparse
import json
import sys

from phenoguard.core.config import update_config
from phenoguard.core.logging import setup_logging

from .errors import InterpretationError
from .factory import create_interpreter


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m phenoguard.services.interpretation",
        description="Interpret a diplotype, apply phenoconversion and look up guidance for a planned drug.",
    )
    parser.add_argument("--gene", required=True, help="Gene symbol, e.g. CYP2C19")
    parser.add_argument("--diplotype", nargs="+", required=True, metavar="ALLELE",
                        help="The two allele names, e.g. '*1' '*2'")
    parser.add_argument("--current-drugs", nargs="*", default=[], metavar="DRUG",
                        help="Concurrent drugs, in order")
    parser.add_argument("--planned-drug", help="Drug to be prescribed; omit to interpret the genotype only")
    parser.add_argument("--data", help="Reference data JSON (memory store)")
    parser.add_argument("--store", choices=["memory", "postgres"], help="Reference data backend")
    parser.add_argument("--strict", action="store_true",
                        help="Fail on overlapping phenotype rules or duplicate guidelines")
    parser.add_argument("--verbose", action="store_true", help="Log pipeline stages")
    return parser


def main(argv: list[str]) -> int:
    args = build_parser().parse_args(argv)
    setup_logging("INFO" if args.verbose else "WARNING")

    overrides = {}
    if args.data:
        overrides["reference_data_path"] = args.data
    if args.store:
        overrides["store"] = args.store
    if args.strict:
        overrides["strict"] = True
    config = update_config(**overrides)

    interpreter = create_interpreter(config)
    try:
        if args.planned_drug:
            result = interpreter.interpret_full(
                args.gene, args.diplotype, args.current_drugs, args.planned_drug
            )
        else:
            result = interpreter.interpret_genotype(args.gene, args.diplotype)
    except InterpretationError as exc:
        print(json.dumps({"ok": False, "error": exc.message}, indent=2))
        return 1
    finally:
        store = interpreter.store
        if hasattr(store, "close"):
            store.close()

    print(json.dumps({"ok": True, **result.model_dump(by_alias=True)}, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))

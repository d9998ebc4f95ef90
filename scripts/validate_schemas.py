"""Check every schema under config/schemas loads and survives a serialize round-trip."""
import json
import os
import sys

import yaml

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from jsonvet.errors import JsonVetError  # noqa: E402
from jsonvet.serialization import validator_from_dict, validator_to_dict  # noqa: E402

DIR = os.path.join(ROOT, "config", "schemas")

bad = 0
for fn in sorted(os.listdir(DIR)):
    if fn.startswith("_") or not fn.endswith((".json", ".yaml", ".yml")):
        continue
    with open(os.path.join(DIR, fn), encoding="utf-8") as fh:
        obj = json.load(fh) if fn.endswith(".json") else yaml.safe_load(fh)
    try:
        first = validator_to_dict(validator_from_dict(obj))
        second = validator_to_dict(validator_from_dict(first))
    except (JsonVetError, ValueError, yaml.YAMLError) as e:
        print("Invalid:", fn, e)
        bad += 1
        continue
    if first != second:
        print("Round-trip mismatch:", fn)
        bad += 1
print("OK" if bad == 0 else f"{bad} invalid files")
sys.exit(1 if bad else 0)

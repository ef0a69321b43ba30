from __future__ import annotations
import argparse, json, logging, sys
from .binary.buffer import Buffer
from .binary.const_buffer import ConstBuffer
from .layout import parse_fields, pack_fields, unpack_fields
from .models.options import BufferOptions

logger = logging.getLogger(__name__)

def cmd_pack(args):
    opts = BufferOptions(capacity=args.capacity, encoding=args.encoding, clamp_format=args.clamp_format)
    fields = parse_fields(args.fields, with_value=True)
    buff = Buffer.from_options(opts)
    results = pack_fields(buff, fields)
    dropped = [r["field"] for r in results if r["status"] != "ok"]
    if dropped:
        logger.warning("%d field(s) did not fit: %s", len(dropped), ", ".join(dropped))
    print(json.dumps({"state": buff.state().model_dump(mode="json"), "fields": results}, indent=2))
    return 0

def cmd_unpack(args):
    try:
        raw = bytes.fromhex(args.data)
    except ValueError as e:
        raise ValueError(f"input is not valid hex: {e}") from e
    fields = parse_fields(args.fields, with_value=False)
    cur = ConstBuffer(raw, encoding=args.encoding)
    results = unpack_fields(cur, fields)
    print(json.dumps({"fields": results, "remaining": cur.read_available()}, indent=2))
    return 0

def build_parser():
    p = argparse.ArgumentParser(prog="bebuffer", description="Big-endian fixed-capacity buffer utilities")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser("pack", help="append fields to a fresh buffer and print its state as JSON")
    sp.add_argument("--capacity", type=int, required=True, help="buffer capacity in bytes")
    sp.add_argument("--encoding", default="utf-8", help="text encoding for str/fmt fields")
    sp.add_argument("--clamp-format", action="store_true", help="keep written <= capacity after truncated fmt fields")
    sp.add_argument("fields", nargs="+", help="u16=0x1234, s8=-1, str:8=abc, bytes=dead, fmt:%%d=42 ...")
    sp.set_defaults(func=cmd_pack)

    sp = sub.add_parser("unpack", help="decode fields from hex input and print them as JSON")
    sp.add_argument("data", help="input bytes as hex")
    sp.add_argument("--encoding", default="utf-8", help="text encoding for str fields")
    sp.add_argument("fields", nargs="+", help="u32, s16, bytes:4, str:8 ...")
    sp.set_defaults(func=cmd_unpack)

    return p

def main(argv=None):
    p = build_parser()
    ns = p.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if ns.verbose else logging.INFO)
    try:
        return ns.func(ns)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())

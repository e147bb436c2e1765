from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import orjson
import typer
from rich.console import Console

from cobolfield.config.logging import configure_logging
from cobolfield.config.screen import load_screen_config
from cobolfield.copybook.parser import parse_copybook
from cobolfield.copybook.record import decode_record, iter_fixed_records, record_length
from cobolfield.display import format_pic_9, format_pic_s9v9, format_pic_x
from cobolfield.errors import CobolFieldError
from cobolfield.numeric.packed import decode_packed, encode_packed
from cobolfield.numeric.value import DecimalContext, DecimalValue, Rounding
from cobolfield.numeric.zoned import decode_zoned, encode_zoned
from cobolfield.picture.matcher import compile_picture

app = typer.Typer(help="Encode, decode, format and validate COBOL fields.")
packed_app = typer.Typer(help="Packed decimal (COMP-3) codec.")
zoned_app = typer.Typer(help="Zoned decimal (overpunch) codec.")
format_app = typer.Typer(help="Fixed-width display formatting.")
picture_app = typer.Typer(help="Picture clause (PICIN) matching.")
record_app = typer.Typer(help="Copybook-driven record decoding.")
console = Console()
err_console = Console(stderr=True)

app.add_typer(packed_app, name="packed")
app.add_typer(zoned_app, name="zoned")
app.add_typer(format_app, name="format")
app.add_typer(picture_app, name="picture")
app.add_typer(record_app, name="record")

T = TypeVar("T")
DUMP_OPTIONS = orjson.OPT_INDENT_2 | orjson.OPT_PASSTHROUGH_DATACLASS


def _run(action: Callable[[], T]) -> T:
    """Turn codec errors into a red message and exit code 2."""
    try:
        return action()
    except CobolFieldError as exc:
        err_console.print(f"[bold red]{type(exc).__name__}[/]: {exc}")
        raise typer.Exit(code=2) from exc


def _emit(payload: Any) -> None:
    console.print(orjson.dumps(payload, option=DUMP_OPTIONS, default=str).decode())


def _rounding(name: str) -> Rounding:
    try:
        return Rounding.from_name(name)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _read_bytes(path: Path) -> bytes:
    if not path.is_file():
        raise typer.BadParameter(f"Input file not found: {path}")
    return path.read_bytes()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    log_json: bool = typer.Option(False, "--log-json", help="Emit logs as JSON lines."),
) -> None:
    configure_logging(verbose=verbose, log_json=log_json)


@packed_app.command("decode")
def packed_decode(
    hex_data: str = typer.Argument(..., help="Packed bytes as hex, e.g. 123C."),
    scale: int = typer.Option(0, "--scale", "-s", help="Implied fractional digits."),
) -> None:
    """Decode a COMP-3 field given as hex."""
    try:
        data = bytes.fromhex(hex_data)
    except ValueError as exc:
        raise typer.BadParameter(f"Not a hex string: {hex_data}") from exc
    value = _run(lambda: decode_packed(data, scale))
    _emit({"hex": data.hex().upper(), "scale": scale, "value": str(value)})


@packed_app.command("encode")
def packed_encode(
    value: str = typer.Argument(..., help="Decimal literal, e.g. -12.34."),
    digits: int = typer.Option(..., "--digits", "-d", help="Total digits of the field."),
    scale: int | None = typer.Option(None, "--scale", "-s", help="Rescale before encoding."),
    rounding: str = typer.Option("half-up", "--rounding", help="half-up | half-even | down."),
    unsigned: bool = typer.Option(False, "--unsigned", help="Use the F sign nibble."),
) -> None:
    """Encode a decimal literal as COMP-3 hex."""
    context = DecimalContext(rounding=_rounding(rounding))
    number = _run(lambda: DecimalValue.parse(value, scale, context))
    data = _run(lambda: encode_packed(number, digits, unsigned=unsigned))
    _emit({"value": str(number), "digits": digits, "hex": data.hex().upper()})


@zoned_app.command("decode")
def zoned_decode(
    text: str = typer.Argument(..., help="Zoned text, e.g. 0012J."),
    scale: int = typer.Option(0, "--scale", "-s", help="Implied fractional digits."),
    unsigned: bool = typer.Option(False, "--unsigned", help="Plain digits, no overpunch."),
) -> None:
    """Decode an overpunched zoned decimal string."""
    value = _run(lambda: decode_zoned(text, scale, signed=not unsigned))
    _emit({"text": text, "scale": scale, "value": str(value)})


@zoned_app.command("encode")
def zoned_encode(
    value: str = typer.Argument(..., help="Decimal literal, e.g. -12.34."),
    digits: int = typer.Option(..., "--digits", "-d", help="Total digits of the field."),
    scale: int | None = typer.Option(None, "--scale", "-s", help="Rescale before encoding."),
    rounding: str = typer.Option("half-up", "--rounding", help="half-up | half-even | down."),
    unsigned: bool = typer.Option(False, "--unsigned", help="Plain digits, no overpunch."),
) -> None:
    """Encode a decimal literal as overpunched zoned text."""
    context = DecimalContext(rounding=_rounding(rounding))
    number = _run(lambda: DecimalValue.parse(value, scale, context))
    text = _run(lambda: encode_zoned(number, digits, signed=not unsigned))
    _emit({"value": str(number), "digits": digits, "text": text})


@format_app.command("pic-x")
def format_x(
    value: str = typer.Argument(..., help="Text to place in the field."),
    length: int = typer.Option(..., "--length", "-l", help="Field length."),
    pad: str = typer.Option("right", "--pad", help="Side to pad: right | left."),
) -> None:
    if pad not in ("right", "left"):
        raise typer.BadParameter("pad must be 'right' or 'left'")
    _emit({"formatted": format_pic_x(value, length, pad)})  # type: ignore[arg-type]


@format_app.command("pic-9")
def format_9(
    value: str = typer.Argument(..., help="Digits (other characters are stripped)."),
    length: int = typer.Option(..., "--length", "-l", help="Field length."),
    strict: bool = typer.Option(False, "--strict", help="Fail instead of truncating."),
) -> None:
    _emit({"formatted": _run(lambda: format_pic_9(value, length, strict=strict))})


@format_app.command("pic-s9v9")
def format_s9v9(
    value: str = typer.Argument(..., help="Decimal literal."),
    integer_digits: int = typer.Option(..., "--integer-digits", "-i"),
    fraction_digits: int = typer.Option(0, "--fraction-digits", "-f"),
    rounding: str = typer.Option("half-up", "--rounding", help="half-up | half-even | down."),
) -> None:
    mode = _rounding(rounding)
    formatted = _run(
        lambda: format_pic_s9v9(
            DecimalValue.parse(value), integer_digits, fraction_digits, rounding=mode
        )
    )
    _emit({"formatted": formatted})


@picture_app.command("match")
def picture_match(
    picture: str = typer.Argument(..., help="Picture, e.g. 999-99-9999."),
    text: str = typer.Argument(..., help="Raw field text."),
    expand: bool = typer.Option(False, "--expand", help="Expand repeat counts like 9(5)."),
) -> None:
    """Exit 0 when TEXT matches PICTURE exactly, 1 otherwise."""
    clause = _run(lambda: compile_picture(picture, expand_repeats=expand))
    mismatch = clause.first_mismatch(text)
    _emit({"picture": picture, "width": clause.width, "matches": mismatch is None, "at": mismatch})
    if mismatch is not None:
        raise typer.Exit(code=1)


@app.command()
def validate(
    screen: Path = typer.Argument(..., help="Screen config (yaml/json)."),
    values: Path = typer.Argument(..., help="JSON object of field name -> raw text."),
) -> None:
    """Run field and cross-field validation; exit 1 when anything fails."""
    if not screen.is_file():
        raise typer.BadParameter(f"Screen config not found: {screen}")
    config = load_screen_config(screen)
    payload = orjson.loads(_read_bytes(values))
    if not isinstance(payload, dict):
        raise typer.BadParameter("Values file must hold a JSON object")
    failures = config.validate(
        {name: None if raw is None else str(raw) for name, raw in payload.items()}
    )
    _emit(
        {
            "screen": config.name,
            "failures": [
                {"field": f.field, "message": f.message, "rule": f.rule} for f in failures
            ],
        }
    )
    if failures:
        raise typer.Exit(code=1)


@record_app.command("decode")
def record_decode(
    copybook: Path = typer.Argument(..., help="Copybook describing one record."),
    data: Path = typer.Argument(..., help="Fixed-length dataset."),
    codepage: str = typer.Option("cp037", "--codepage", "-p", help="EBCDIC codepage."),
    max_records: int = typer.Option(10, "--max-records", help="Limit records decoded."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Optional JSON path."),
) -> None:
    """Decode fixed-length records using a copybook layout."""
    if not copybook.is_file():
        raise typer.BadParameter(f"Copybook not found: {copybook}")
    fields = _run(lambda: parse_copybook(copybook.read_text()))
    length = _run(lambda: record_length(fields))
    raw = _read_bytes(data)
    records = []
    for index, body in enumerate(iter_fixed_records(raw, length)):
        if index >= max_records:
            break
        records.append(_run(lambda body=body: decode_record(fields, body, codepage)))
    if output:
        output.write_bytes(orjson.dumps(records, option=DUMP_OPTIONS, default=str))
        console.print(f"[bold green]Wrote[/] {len(records)} records to {output}")
    else:
        _emit(records)


if __name__ == "__main__":
    app()

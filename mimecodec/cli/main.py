import click
from pydantic import ValidationError

from mimecodec.codecs import predicted_base64_length
from mimecodec.config import CodecConfig, EncodingType
from mimecodec.exceptions import MimeCodecError
from mimecodec.sources import StreamSource
from mimecodec.transfer import decoder_for, encoder_for

ENCODING_CHOICES = [encoding.value for encoding in EncodingType]


class MimeCodecCtx:
    def __init__(self) -> None:
        self.config: CodecConfig | None = None


pass_mctx = click.make_pass_decorator(MimeCodecCtx, ensure=True)


def _pipe(source, output) -> None:
    for chunk in source.iter_chunks():
        output.write(chunk)
    output.flush()


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(None, "--version", prog_name="mimecodec", package_name="mimecodec")
@click.option(
    "--buffer-size",
    type=click.IntRange(min=1),
    default=None,
    help="Bytes pulled from the input per read (default: $MIMECODEC_BUFFER_SIZE or 32768).",
)
@pass_mctx
def cli(mctx: MimeCodecCtx, buffer_size: int | None) -> None:
    overrides = {"buffer_size": buffer_size} if buffer_size is not None else {}
    try:
        mctx.config = CodecConfig.from_env(**overrides)
    except ValidationError as exc:
        raise click.UsageError(f"Invalid configuration: {exc}") from exc


@cli.command(help="Encode INPUT (default: stdin) with a transfer encoding.")
@click.option("--encoding", "-e", type=click.Choice(ENCODING_CHOICES, case_sensitive=False), required=True)
@click.argument("input_file", metavar="INPUT", type=click.File("rb"), default="-")
@click.option("--output", "-o", type=click.File("wb"), default="-", help="Output file (default: stdout).")
@pass_mctx
def encode(mctx: MimeCodecCtx, encoding: str, input_file, output) -> None:
    _pipe(encoder_for(StreamSource(input_file), encoding, mctx.config), output)


@cli.command(help="Decode transfer-encoded INPUT (default: stdin).")
@click.option("--encoding", "-e", type=click.Choice(ENCODING_CHOICES, case_sensitive=False), required=True)
@click.argument("input_file", metavar="INPUT", type=click.File("rb"), default="-")
@click.option("--output", "-o", type=click.File("wb"), default="-", help="Output file (default: stdout).")
@pass_mctx
def decode(mctx: MimeCodecCtx, encoding: str, input_file, output) -> None:
    _pipe(decoder_for(StreamSource(input_file), encoding, mctx.config), output)


@cli.command(help="Print the base64 encoded size of LENGTH raw bytes.")
@click.argument("length", type=click.IntRange(min=0))
def size(length: int) -> None:
    click.echo(predicted_base64_length(length))


def main() -> None:
    try:
        cli(obj=MimeCodecCtx())
    except MimeCodecError as exc:
        click.echo(f"❌ {exc}", err=True)
        raise SystemExit(1) from exc

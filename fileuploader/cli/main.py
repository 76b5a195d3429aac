"""fileuploader CLI - Main commands."""
import asyncio
import logging
import mimetypes
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress as ProgressBar, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn

from fileuploader import (
    Done,
    Failed,
    FileAccessError,
    FileUploader,
    Progress,
    Started,
    setup_logging
)
from fileuploader.core.upload.services import FileStager

app = typer.Typer(
    name="fileuploader",
    help="Upload files as multipart/form-data",
    add_completion=False
)
console = Console()


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


def parse_header(raw: str) -> Tuple[str, str]:
    """Parse ``Name: Value``."""
    name, sep, value = raw.partition(':')
    if not sep or not name.strip():
        raise typer.BadParameter(f"Header must look like 'Name: Value', got {raw!r}")
    return name.strip(), value.strip()


def parse_field(raw: str) -> Tuple[str, str]:
    """Parse ``key=value``."""
    key, sep, value = raw.partition('=')
    if not sep or not key:
        raise typer.BadParameter(f"Field must look like 'key=value', got {raw!r}")
    return key, value


@app.callback()
def main():
    """Upload files as multipart/form-data."""


@app.command()
def upload(
    file_path: str = typer.Argument(..., help="Local file to upload, '-' for standard input"),
    url: str = typer.Option(..., "--url", "-u", help="Server URL"),
    header: List[str] = typer.Option([], "--header", "-H", help="Request header 'Name: Value' (repeatable)"),
    field: List[str] = typer.Option([], "--field", "-F", help="Form field 'key=value' (repeatable)"),
    part_name: str = typer.Option("file", "--part-name", help="Form field name of the file part"),
    file_name: Optional[str] = typer.Option(None, "--file-name", help="File name reported to the server"),
    mime_type: Optional[str] = typer.Option(None, "--mime-type", "-m", help="Content type of the file part"),
    no_progress: bool = typer.Option(False, "--no-progress", help="Send the file without progress reporting"),
    timeout: Optional[float] = typer.Option(None, "--timeout", "-t", help="Total request timeout in seconds"),
    segment_size: int = typer.Option(2048, "--segment-size", help="Bytes per progress step"),
    suffix: str = typer.Option("", "--suffix", help="Extension of the staged file when reading standard input"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log upload details"),
):
    """Upload a file and show its progress."""
    if verbose:
        logging.basicConfig(format="%(asctime)s %(name)s %(levelname)s: %(message)s")
        setup_logging(logging.DEBUG)

    staged = None
    if file_path == "-":
        try:
            staged = FileStager(suffix=suffix).stage(sys.stdin.buffer)
        except FileAccessError as e:
            console.print(f"[red]Cannot read standard input: {escape(str(e))}[/red]")
            raise typer.Exit(1)
        path = staged
    else:
        path = Path(file_path)
        if not path.is_file():
            console.print(f"[red]File not found: {escape(str(path))}[/red]")
            raise typer.Exit(1)

    name = file_name or path.name
    content_type = mime_type or mimetypes.guess_type(name)[0] or "application/octet-stream"

    builder = (FileUploader.builder()
               .server_url(url)
               .part_params(part_name, name, content_type)
               .segment_size(segment_size))
    for raw in header:
        builder.header(*parse_header(raw))
    for raw in field:
        builder.form_field(*parse_field(raw))
    if timeout is not None:
        builder.timeout(total=timeout)
    uploader = builder.build()

    async def do_upload() -> bool:
        with ProgressBar(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console
        ) as progress:
            task = progress.add_task(f"Uploading {escape(name)}", total=100)

            async with uploader.upload(path, with_progress=not no_progress) as events:
                async for state in events:
                    if isinstance(state, Started):
                        progress.update(task, description=f"Uploading {escape(name)}")
                    elif isinstance(state, Progress):
                        progress.update(task, completed=state.percent)
                    elif isinstance(state, Done):
                        progress.update(task, completed=100)
                        progress.stop()
                        console.print(f"[green]HTTP {state.status}[/green]" if state.ok
                                      else f"[yellow]HTTP {state.status}[/yellow]")
                        console.print(state.body, markup=False)
                        return True
                    elif isinstance(state, Failed):
                        progress.stop()
                        console.print(f"[red]Upload failed: {escape(str(state.cause))}[/red]")
                        return False
        return False

    try:
        ok = run_async(do_upload())
    finally:
        if staged is not None:
            staged.unlink(missing_ok=True)

    if not ok:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()

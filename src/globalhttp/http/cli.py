"""
GlobalHTTP CLI commands.
"""

import json
import xml.etree.ElementTree as ET
from dataclasses import replace
from pathlib import Path

import click
from rich.console import Console
from rich.syntax import Syntax

from globalhttp.config import get_config
from globalhttp.errors import TransportError
from globalhttp.http.client import HTTPClient, HTTPRequest, HTTPResponse
from globalhttp.http.payload import prepare_payload
from globalhttp.logging_config import configure_logging


def parse_headers(header_strings: list[str]) -> dict[str, str]:
    """Parse header strings in 'Name: Value' format."""
    headers = {}
    for h in header_strings:
        if ":" in h:
            name, value = h.split(":", 1)
            headers[name.strip()] = value.strip()
    return headers


def format_body(resp: HTTPResponse) -> tuple[str, str] | None:
    """Pretty-print a JSON or XML body; returns (text, lexer) or None."""
    if resp.is_json:
        try:
            return json.dumps(json.loads(resp.body), indent=2), "json"
        except ValueError:
            return None
    if resp.is_xml:
        try:
            element = ET.fromstring(resp.body_bytes)
        except ET.ParseError:
            return None
        ET.indent(element, space="  ")
        return ET.tostring(element, encoding="unicode"), "xml"
    return None


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def cli(debug: bool):
    """Typed HTTP requests with XML and JSON payloads."""
    configure_logging(debug=debug)


@cli.command("request")
@click.argument("url")
@click.option("-X", "--method", default="GET", help="HTTP method (GET, PUT, POST, DELETE)")
@click.option("-H", "--header", multiple=True, help="Headers in 'Name: Value' format")
@click.option("-d", "--data", help="Request body, sent verbatim")
@click.option("--data-file", type=click.Path(exists=True, dir_okay=False),
              help="Read the request body from a file")
@click.option("-f", "--format", "fmt", type=click.Choice(["xml", "json"]),
              default=None, help="Payload and response format")
@click.option("-e", "--encoding", default=None, help="Payload encoding")
@click.option("-t", "--timeout", type=float, default=None, help="Request timeout in seconds")
@click.option("-k", "--insecure", is_flag=True, help="Disable SSL verification")
@click.option("-v", "--verbose", is_flag=True, help="Show request and response headers")
@click.option("--raw", is_flag=True, help="Show raw response without formatting")
def request_cmd(url: str, method: str, header: tuple, data: str | None,
                data_file: str | None, fmt: str | None, encoding: str | None,
                timeout: float | None, insecure: bool, verbose: bool, raw: bool):
    """Send a request and print the response.

    Examples:
        globalhttp request https://api.example.com/users/42
        globalhttp request https://api.example.com/users -X POST -d '<user><name>a</name></user>'
        globalhttp request https://api.example.com/users -X PUT -f json --data-file user.json
    """
    console = Console()
    config = get_config()
    defaults = config.defaults.override(format=fmt, payload_encoding=encoding)
    config = replace(
        config,
        timeout=timeout or config.timeout,
        verify_ssl=config.verify_ssl and not insecure,
        raise_for_status=False,
    )

    if data is not None and data_file:
        console.print("[red]Error:[/red] use either --data or --data-file")
        raise SystemExit(1)
    if data_file:
        data = Path(data_file).read_text(encoding=defaults.payload_encoding)

    headers = parse_headers(list(header))
    body = None
    if data is not None:
        payload = prepare_payload(
            data,
            format=defaults.resolved_payload_format,
            encoding=defaults.payload_encoding,
        )
        body = payload.body
        headers.setdefault("Content-Type", payload.content_type)
    headers.setdefault("Accept", defaults.format.media_type)

    req = HTTPRequest(method=method, url=url, headers=headers, body=body)

    if verbose:
        console.print("\n[cyan]Request:[/cyan]")
        console.print(f"  {req.method} {req.url}")
        for h_name, h_value in req.headers.items():
            console.print(f"  [dim]{h_name}:[/dim] {h_value}")
        if body:
            console.print(f"  [dim]Body:[/dim] {len(body)} bytes")
        console.print()

    try:
        with HTTPClient(config) as client:
            resp = client.execute(req)
    except TransportError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    if resp.is_success:
        status_color = "green"
    elif resp.is_redirect:
        status_color = "yellow"
    elif resp.is_client_error:
        status_color = "red"
    else:
        status_color = "red bold"
    console.print(f"[{status_color}]{resp.status_code} {resp.status_text}[/{status_color}] "
                  f"({resp.elapsed_ms:.0f}ms)")

    if verbose:
        console.print("\n[cyan]Response Headers:[/cyan]")
        for h_name, h_value in resp.headers.items():
            console.print(f"  [dim]{h_name}:[/dim] {h_value}")

    if resp.body:
        console.print()
        formatted = None if raw else format_body(resp)
        if formatted is None:
            console.print(resp.body, markup=False)
        else:
            text, lexer = formatted
            console.print(Syntax(text, lexer, theme="monokai", line_numbers=False))

    console.print(f"\n[dim]Content-Type: {resp.content_type or 'N/A'} | "
                  f"Size: {len(resp.body_bytes):,} bytes[/dim]")

    if resp.is_client_error or resp.is_server_error:
        raise SystemExit(1)


def main():
    cli()

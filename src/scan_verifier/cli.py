"""CLI entry point for the scan accuracy checker."""
import logging
import webbrowser
from pathlib import Path
from typing import Optional, Tuple
import click
import yaml
from pydantic import ValidationError

from form_schemas.form_config import FormConfig, load_form_config

from .alignment import load_alignment_scores, rank_folders_by_alignment
from .folders import copy_subset, list_client_ids, map_ids_to_folders
from .ground_truth import load_form_workbook
from .metrics import build_summary
from .normalize import normalize_identifier
from .reconcile import reconcile
from .report import AccuracyReport
from .scan_output import load_scan_output

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def load_config_or_exit(config_path: Optional[str]) -> FormConfig:
    """Load the form configuration, exiting with a message if it is invalid."""
    try:
        return load_form_config(Path(config_path) if config_path else None)
    except (ValidationError, yaml.YAMLError) as e:
        click.echo(f"Error: invalid form configuration:\n{e}", err=True)
        raise SystemExit(1)


@click.group()
@click.option('--verbose', '-v', count=True,
              help='Show per-field mismatches (-v) or all diagnostics (-vv)')
def cli(verbose: int):
    """Scan accuracy checker - compare scanned form values with verified ground truth."""
    if verbose >= 2:
        logging.getLogger().setLevel(logging.DEBUG)
    elif verbose == 1:
        logging.getLogger().setLevel(logging.INFO)


@cli.command()
@click.argument('scan_output_root', type=click.Path(exists=True, file_okay=False))
@click.option('--workbook', '-w', type=click.Path(exists=True, dir_okay=False), required=True,
              help='Ground truth .xlsx workbook')
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False), default=None,
              help='Form configuration YAML (defaults to the bundled form layout)')
@click.option('--output', '-o', type=click.Path(), default=None,
              help='Output file for results JSON')
@click.option('--html', 'html_path', type=click.Path(), default=None,
              help='Output file for the HTML report')
@click.option('--show-ids', is_flag=True, default=False,
              help='List matching and unmatched client IDs')
@click.option('--open-report', is_flag=True, default=False,
              help='Open HTML report in browser after generation')
def check(scan_output_root: str, workbook: str, config_path: Optional[str], output: Optional[str],
          html_path: Optional[str], show_ids: bool, open_report: bool):
    """
    Measure how accurately the scanner read a batch of forms.

    SCAN_OUTPUT_ROOT: Folder with one sub-folder per scanned form

    Example:
        scan-verifier check ./scan-output --workbook master.xlsx
        scan-verifier -v check ./scan-output -w master.xlsx --html report.html
    """
    config = load_config_or_exit(config_path)

    try:
        expected = load_form_workbook(Path(workbook), config)
        actual = load_scan_output(Path(scan_output_root), config)
    except (FileNotFoundError, KeyError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    result = reconcile(actual, expected, config.field_specs)
    summary = build_summary(result, config.field_specs)
    report = AccuracyReport(summary=summary, source=str(scan_output_root))

    click.echo(report.render_text(show_ids=show_ids))

    if output:
        report.save_json(Path(output))
        click.echo(f"\nResults saved to: {output}")

    if html_path:
        report_path = report.save_html(Path(html_path))
        click.echo(f"HTML report saved to: {report_path}")
        if open_report:
            webbrowser.open(f"file://{report_path.absolute()}")


@cli.command()
@click.argument('forms_dir', type=click.Path(exists=True, file_okay=False))
@click.option('--workbook', '-w', type=click.Path(exists=True, dir_okay=False), required=True,
              help='Workbook holding the alignment review columns')
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False), default=None,
              help='Form configuration YAML (defaults to the bundled form layout)')
def alignment(forms_dir: str, workbook: str, config_path: Optional[str]):
    """
    Print the misalignment score of each scanned-form folder.

    FORMS_DIR: Folder whose sub-folders are named <name>_id_<client id>

    Example:
        scan-verifier alignment ./relevant-training-examples -w master.xlsx
    """
    config = load_config_or_exit(config_path)
    if not config.alignment_columns:
        click.echo("Error: no alignment_columns in form configuration", err=True)
        raise SystemExit(1)

    try:
        scores = load_alignment_scores(Path(workbook), config)
    except (FileNotFoundError, KeyError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    id_to_folder = map_ids_to_folders([Path(forms_dir)])
    for folder, score in rank_folders_by_alignment(scores, id_to_folder).items():
        click.echo(f"{folder}: {score}")


@cli.command(name='client-ids')
@click.argument('directory', type=click.Path(exists=True, file_okay=False))
def client_ids(directory: str):
    """List the client IDs found in the folder names of DIRECTORY."""
    for client_id in sorted(list_client_ids(Path(directory))):
        click.echo(client_id)


@cli.command()
@click.argument('destination', type=click.Path(file_okay=False))
@click.option('--source', '-s', 'sources', multiple=True, required=True,
              type=click.Path(exists=True, file_okay=False),
              help='Folder to search for form folders (repeatable)')
@click.option('--id', 'ids', multiple=True, help='Client ID to copy (repeatable)')
@click.option('--ids-from', type=click.Path(exists=True, file_okay=False), default=None,
              help='Copy every client ID whose folder exists in this directory')
def subset(destination: str, sources: Tuple[str, ...], ids: Tuple[str, ...], ids_from: Optional[str]):
    """
    Copy the scan folders of selected clients into DESTINATION.

    Example:
        scan-verifier subset ./relevant -s "./August Scan Output" --id 10234 --id 10567
        scan-verifier subset ./relevant -s ./output -s ./output/extra --ids-from ./reviewed
    """
    wanted = {normalize_identifier(i) for i in ids}
    if ids_from:
        wanted |= {normalize_identifier(i) for i in list_client_ids(Path(ids_from))}
    wanted -= {None, ""}
    if not wanted:
        click.echo("Error: give at least one --id or --ids-from", err=True)
        raise SystemExit(1)

    missing = copy_subset(wanted, [Path(s) for s in sources], Path(destination))
    click.echo(f"Copied {len(wanted) - len(missing)}/{len(wanted)} client folders to {destination}")
    for client_id in missing:
        click.echo(f"  Client id {client_id} not found!")


if __name__ == '__main__':
    cli()

"""Command line front end for the cache simulator.

Usage:
    csim [-hv] -S <num> -K <num> -B <num> -p <policy> -t <file>
"""
import logging

import click

from csim.core.cache import CacheGeometry, ConfigurationError
from csim.core.simulator import CacheSimulator
from csim.core.trace import open_trace, parse_trace
from csim.data.stats_export import Exporter, Statistics, export_chart_pdf

logger = logging.getLogger(__name__)

CONTEXT_SETTINGS = dict(help_option_names=['-h', '--help'])

EPILOG = """\b
Examples:
$ csim    -S 16  -K 1 -B 16 -p LRU -t traces/yi.trace
$ csim -v -S 256 -K 2 -B 16 -p LRU -t traces/yi.trace
"""


def _fail(ctx: click.Context, message: str, show_usage: bool = False):
    click.echo(f"ERROR: {message}", err=True)
    if show_usage:
        click.echo(ctx.get_help(), err=True)
    ctx.exit(1)


def _echo_access(record, outcomes):
    click.echo(f"{record} " + ' '.join(o.value for o in outcomes))


@click.command(context_settings=CONTEXT_SETTINGS, epilog=EPILOG)
@click.option('-v', 'verbose', is_flag=True, help='Optional verbose flag.')
@click.option('-S', 'num_sets', type=int, metavar='<num>', help='Number of sets.           (must be > 0)')
@click.option('-K', 'lines_per_set', type=int, metavar='<num>', help='Number of lines per set.  (must be > 0)')
@click.option('-B', 'block_size', type=int, metavar='<num>', help='Number of bytes per line. (must be > 0)')
@click.option('-p', 'policy', metavar='<policy>', help="Eviction policy. (one of 'FIFO', 'LRU')")
@click.option('-t', 'trace_file', metavar='<file>', help='Trace file.')
@click.option('--csv', 'csv_path', type=click.Path(dir_okay=False), help='Write statistics to a CSV file.')
@click.option('--json', 'json_path', type=click.Path(dir_okay=False), help='Write statistics to a JSON file.')
@click.option('--chart', 'chart_path', type=click.Path(dir_okay=False), help='Plot the hit rate over time to a PDF file.')
@click.option('--debug', is_flag=True, help='Log debug messages to stderr.')
@click.pass_context
def main(ctx, verbose, num_sets, lines_per_set, block_size, policy, trace_file,
         csv_path, json_path, chart_path, debug):
    """Simulate a set-associative cache against a memory trace."""
    logging.basicConfig(level=logging.DEBUG if debug else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    # ensure that all required arguments were specified and positive
    geometry_args = (num_sets, lines_per_set, block_size)
    if any(v is None or v <= 0 for v in geometry_args) or not policy or not trace_file:
        _fail(ctx, "Negative or missing command line arguments", show_usage=True)

    try:
        geometry = CacheGeometry(num_sets, lines_per_set, block_size)
        sim = CacheSimulator(geometry, policy, stats=Statistics(track_history=chart_path is not None))
    except ConfigurationError as e:
        _fail(ctx, str(e))

    try:
        fh = open_trace(trace_file)
    except OSError as e:
        _fail(ctx, f"{trace_file}: {e.strerror}")

    with fh:
        stats = sim.run_all(parse_trace(fh), callback=_echo_access if verbose else None)

    click.echo(stats.summary())

    exports = (
        (csv_path, Exporter.export_stats_csv),
        (json_path, Exporter.export_stats_json),
        (chart_path, lambda path, s: export_chart_pdf(s.hit_rate_history, path)),
    )
    for path, export in exports:
        if not path:
            continue
        try:
            export(path, stats)
        except OSError as e:
            _fail(ctx, f"{path}: {e.strerror}")
        logger.debug("wrote %s", path)


if __name__ == '__main__':
    main()

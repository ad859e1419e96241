"""Command line tests, driven through click's CliRunner."""
import json

import pytest
from click.testing import CliRunner

from csim.cli import main

YI_TRACE = [' L 10,1', ' M 20,1', ' L 22,1', ' S 18,1', ' L 110,1', ' L 210,1', ' M 12,1']


def _run(args):
    return CliRunner().invoke(main, args)


def _last_line(result):
    return result.output.strip().splitlines()[-1]


@pytest.mark.parametrize('lines,expected', [
    ([' L 0,1'], 'hits:0 misses:1 evictions:0'),
    ([' L 0,1', ' L 0,1'], 'hits:1 misses:1 evictions:0'),
    ([' L 0,1', ' L 1,1'], 'hits:0 misses:2 evictions:1'),
])
def test_summary_single_line_cache(write_trace, lines, expected):
    result = _run(['-S', '1', '-K', '1', '-B', '1', '-p', 'LRU', '-t', write_trace(lines)])
    assert result.exit_code == 0, result.output
    assert _last_line(result) == expected


@pytest.mark.parametrize('policy', ['LRU', 'FIFO'])
def test_yi_trace(write_trace, policy):
    result = _run(['-S', '16', '-K', '1', '-B', '16', '-p', policy, '-t', write_trace(YI_TRACE)])
    assert result.exit_code == 0, result.output
    assert _last_line(result) == 'hits:4 misses:5 evictions:3'


def test_verbose_lists_outcomes(write_trace):
    path = write_trace(['I 400,4', ' L 0,1', ' M 1,1'])
    result = _run(['-v', '-S', '1', '-K', '1', '-B', '1', '-p', 'FIFO', '-t', path])
    assert result.exit_code == 0, result.output
    lines = result.output.strip().splitlines()
    assert lines[-3:] == [
        'L 0,1 MISS',
        'M 1,1 MISS+EVICTION HIT',
        'hits:1 misses:2 evictions:1',
    ]


def test_help_exits_zero():
    result = _run(['-h'])
    assert result.exit_code == 0
    assert 'Usage' in result.output
    assert 'FIFO' in result.output


@pytest.mark.parametrize('args', [
    ['-K', '1', '-B', '1', '-p', 'LRU'],
    ['-S', '1', '-K', '0', '-B', '1', '-p', 'LRU'],
    ['-S', '1', '-K', '1', '-B', '0', '-p', 'LRU'],
    ['-S', '1', '-K', '1', '-B', '1'],
])
def test_missing_or_negative_arguments(write_trace, args):
    result = _run(args + ['-t', write_trace([' L 0,1'])])
    assert result.exit_code == 1
    assert 'Negative or missing command line arguments' in result.output


def test_missing_trace_option():
    result = _run(['-S', '1', '-K', '1', '-B', '1', '-p', 'LRU'])
    assert result.exit_code == 1


@pytest.mark.parametrize('args,message', [
    (['-S', '3', '-K', '1', '-B', '1', '-p', 'LRU'], 'S must be a power of 2'),
    (['-S', '4', '-K', '1', '-B', '12', '-p', 'LRU'], 'B must be a power of 2'),
    (['-S', '4', '-K', '1', '-B', '16', '-p', 'MRU'], 'unknown eviction policy'),
])
def test_configuration_errors(write_trace, args, message):
    result = _run(args + ['-t', write_trace([' L 0,1'])])
    assert result.exit_code == 1
    assert message in result.output


def test_unreadable_trace(tmp_path):
    missing = str(tmp_path / 'missing.trace')
    result = _run(['-S', '1', '-K', '1', '-B', '1', '-p', 'LRU', '-t', missing])
    assert result.exit_code == 1
    assert 'ERROR: %s' % missing in result.output


def test_exports(write_trace, tmp_path):
    csv_path = tmp_path / 'out.csv'
    json_path = tmp_path / 'out.json'
    chart_path = tmp_path / 'out.pdf'
    result = _run(['-S', '16', '-K', '1', '-B', '16', '-p', 'LRU', '-t', write_trace(YI_TRACE),
                   '--csv', str(csv_path), '--json', str(json_path), '--chart', str(chart_path)])
    assert result.exit_code == 0, result.output
    data = json.loads(json_path.read_text())
    assert (data['hits'], data['misses'], data['evictions']) == (4, 5, 3)
    assert len(data['hit_rate_history']) == 9
    assert csv_path.read_text().startswith('hits,misses,evictions')
    assert chart_path.exists()


def test_export_to_unwritable_path(write_trace, tmp_path):
    bad = str(tmp_path / 'no' / 'such' / 'dir' / 'out.csv')
    result = _run(['-S', '1', '-K', '1', '-B', '1', '-p', 'LRU', '-t', write_trace([' L 0,1']), '--csv', bad])
    assert result.exit_code == 1
    assert 'hits:0 misses:1 evictions:0' in result.output


def test_undecodable_trace_line_skipped(tmp_path):
    path = tmp_path / 'binary.trace'
    path.write_bytes(b' L 0,1\n\xff\xfe garbage\n L 0,1\n')
    result = _run(['-S', '1', '-K', '1', '-B', '1', '-p', 'LRU', '-t', str(path)])
    assert result.exit_code == 0, result.output
    assert _last_line(result) == 'hits:1 misses:1 evictions:0'

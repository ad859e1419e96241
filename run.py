"""Entry point for the cache simulator.

Usage:
    python run.py -S 16 -K 1 -B 16 -p LRU -t traces/yi.trace
    python run.py -h
"""
from csim.cli import main


if __name__ == '__main__':
    main()

"""Statistics and exporter.
"""
import csv
import json
from typing import Dict, List, Optional

FIELDS = ['hits', 'misses', 'evictions', 'accesses', 'hit_rate', 'miss_rate']


def export_chart_pdf(hit_rate_history: List[float], fpath: str) -> str:
    """Render the hit-rate history to a PDF using matplotlib and save it.
    Returns the saved file path.
    """
    # Use matplotlib without a display
    import matplotlib
    matplotlib.use('Agg')
    import matplotlib.pyplot as plt

    data = list(hit_rate_history) or [0]
    fig, ax = plt.subplots(figsize=(6, 2))
    ax.plot(range(len(data)), data, color='#FFA500', linewidth=2)
    ax.fill_between(range(len(data)), data, color='#FFA500', alpha=0.1)
    ax.set_ylim(0, 1)
    ax.set_xlabel('Access')
    ax.set_ylabel('Hit rate')
    ax.grid(False)
    fig.tight_layout()
    fig.savefig(fpath, format='pdf', dpi=150)
    plt.close(fig)
    return fpath


class Statistics:
    def __init__(self, track_history: bool = False):
        self.track_history = track_history
        self.reset()

    def reset(self):
        # counters start from zero
        self.hits = 0
        self.misses = 0
        self.evictions = 0
        self.hit_rate_history: List[float] = []

    def record_access(self, hit: bool, evicted: bool = False):
        # call this once for every single-line access
        if hit:
            self.hits += 1
        else:
            self.misses += 1
            if evicted:
                self.evictions += 1
        if self.track_history:
            self.hit_rate_history.append(self.hit_rate)

    @property
    def accesses(self):
        return self.hits + self.misses

    @property
    def hit_rate(self):
        return (self.hits / self.accesses) if self.accesses else 0.0

    @property
    def miss_rate(self):
        return (self.misses / self.accesses) if self.accesses else 0.0

    def as_dict(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in FIELDS}

    def summary(self) -> str:
        return f"hits:{self.hits} misses:{self.misses} evictions:{self.evictions}"

    def __repr__(self):
        return f"Statistics({self.summary()})"


class Exporter:
    @staticmethod
    def export_stats_csv(path: str, stats: Statistics):
        with open(path, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(FIELDS)
            writer.writerow([getattr(stats, name) for name in FIELDS])

    @staticmethod
    def export_stats_json(path: str, stats: Statistics, extra: Optional[Dict[str, object]] = None):
        data = stats.as_dict()
        if stats.track_history:
            data['hit_rate_history'] = list(stats.hit_rate_history)
        if extra:
            data.update(extra)
        with open(path, 'w', encoding='utf-8') as fh:
            json.dump(data, fh, indent=2)

"""Portfolio Builder: capital allocation across a ranked instrument shortlist."""

__version__ = "0.1.0"

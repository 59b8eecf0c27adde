"""Statistical engines over classification record streams.

- correlation: semantic-type co-occurrence, distance and direction
- evaluation: precision/recall/F1 against a reference labeling
"""

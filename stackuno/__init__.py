"""UNO engine with draw stacking, response timers, seating and match scoring."""

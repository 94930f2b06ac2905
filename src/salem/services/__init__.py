"""Domain services: money handling, invoice periods, allocation and rates."""

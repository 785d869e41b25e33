"""Plotly and pandas presentation of simulation results."""

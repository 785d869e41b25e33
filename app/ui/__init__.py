"""Streamlit UI fragments and styles."""

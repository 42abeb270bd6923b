"""Interfaz Streamlit y utilidades de presentación de resultados."""

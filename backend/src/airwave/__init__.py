"""Airtable to Wavespeed image generation relay."""

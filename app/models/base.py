# app/models/base.py
"""Shared declarative base for every mapped table"""
from sqlalchemy.orm import declarative_base

Base = declarative_base()

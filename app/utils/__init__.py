"""Shared utilities for CodeZetta"""

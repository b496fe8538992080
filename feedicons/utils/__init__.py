"""Shared helpers for feedicons"""

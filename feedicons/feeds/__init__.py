"""Syndication feed discovery"""

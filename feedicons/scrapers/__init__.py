"""Page scraping components for favicon and feed discovery"""

"""
leadgate — lead ingestion and heuristic scoring for job leads.

Source adapters (leadgate.ingest) normalize channel payloads into LeadItems;
the scoring engine (leadgate.scoring) decides which leads are worth pursuing.
"""
__version__ = '1.0.0'

import logging

"""
Shared logger for proxy-deployments. INFO level, sent to stderr with a StreamHandler.
"""

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)
logger.addHandler(logging.StreamHandler())

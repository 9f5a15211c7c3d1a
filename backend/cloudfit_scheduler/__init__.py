"""CloudFit interview scheduling service."""

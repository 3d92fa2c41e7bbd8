"""Six Figure Jobs: salary normalization, classification and repair for job postings."""

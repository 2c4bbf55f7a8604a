"""Output — Rich and JSON rendering of ServiceResult."""

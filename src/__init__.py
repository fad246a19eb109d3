"""Source packages for quiz-data-seed."""

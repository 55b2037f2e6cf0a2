"""Receipt OCR pre-fill for a personal finance tracker.

Turns the OCR transcript of a photographed receipt into an amount,
a date, and a short description that pre-fill an income/expense form
for human review.
"""

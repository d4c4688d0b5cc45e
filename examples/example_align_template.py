"""Example script: highlight what each template tag replaced."""

from deid_review import align_template
from deid_review.diagnostics import locate_divergence

original = "The patient, Jane Doe, reported fever starting on 2024-03-10."
template = "The patient, <name>, reported fever starting on <date>."

for span in align_template(original, template):
    marker = f"[{span.tag_type}]" if span.is_highlighted else ""
    print(f"{span.text!r} {marker}")

broken = "The patient, <name>, reported a cough starting on <date>."
print(locate_divergence(original, broken))

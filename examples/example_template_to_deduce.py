"""Example script for converting aligned templates to Deduce annotations."""

import docdeid as dd

from deid_review import align_template
from deid_review.deduce import (
    deduce_to_template,
    spans_to_deduce,
    template_to_annotations,
)


def main() -> None:
    original = "John went to the Emory clinic for a routine exam on Jan 5, 2023."
    template = "<name> went to the <location> clinic for a routine exam on <date>."

    print("Template -> annotations")
    for annotation in template_to_annotations(original, template):
        print(annotation)

    print("\nTemplate -> Deduce")
    for annotation in spans_to_deduce(align_template(original, template)):
        print(annotation)

    print("\nDeduce -> template")
    annotations = [
        dd.Annotation(text="John", start_char=0, end_char=4, tag="persoon"),
        dd.Annotation(text="Emory", start_char=17, end_char=22, tag="ziekenhuis"),
    ]
    print(deduce_to_template(original, annotations))


if __name__ == "__main__":
    main()

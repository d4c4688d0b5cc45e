"""Example script: import a CSV, edit a template and export the session."""

from deid_review.session import ReviewSession

CSV = """text,deid_text,champsid
"Jan Jansen lives in Utrecht, NL",<name> lives in <location>,CH010
Seen on 5 May 2024,Seen on 5 May 2024,CH011
"""


def main() -> None:
    session = ReviewSession()
    decoded = session.import_csv(CSV, source="example.csv")
    print(f"{len(session)} samples, {len(decoded.skipped)} rows skipped")

    print(session.highlighted())
    print(session.divergence())

    session.next()
    session.edit("Seen on <date>")
    print(session.highlighted())

    print(session.export_csv())


if __name__ == "__main__":
    main()

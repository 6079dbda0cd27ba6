"""Built-in demo contacts."""

from rolodex.contacts.records import Record

SAMPLE_CONTACTS: tuple[Record, ...] = (
    Record("Simon", "23465123"),
    Record("Amber", "356345623"),
    Record("Sharon", "3453453"),
    Record("Tom", "682649834"),
    Record("Cris", "348761"),
    Record("Anna", "3676174"),
    Record("Will", "34548772"),
    Record("Harry", "65473"),
    Record("Peter", "456773"),
    Record("Zoe", "788572434"),
)

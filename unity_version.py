import re

VERSION_PATTERN = re.compile(r'^(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:([abfpx])(\d+))?')

# Newest C# version each Unity release line compiles, newest first.
LANGUAGE_VERSIONS = [
    ((2022, 2), "CSharp9_0"),
    ((2020, 2), "CSharp8_0"),
    ((2018, 3), "CSharp7_3"),
    ((2017, 1), "CSharp6"),
]
FALLBACK_LANGUAGE_VERSION = "CSharp4"
UNKNOWN_VERSION_LANGUAGE_VERSION = "CSharp7_3"

LANGUAGE_VERSION_CHOICES = [
    "CSharp1", "CSharp2", "CSharp3", "CSharp4", "CSharp5", "CSharp6",
    "CSharp7", "CSharp7_1", "CSharp7_2", "CSharp7_3", "CSharp8_0",
    "CSharp9_0", "CSharp10_0", "Latest",
]


class UnityVersion:
    def __init__(self, major, minor=0, build=0, release_type='f', release=1):
        self.major = major
        self.minor = minor
        self.build = build
        self.release_type = release_type
        self.release = release

    @classmethod
    def parse(cls, text):
        match = VERSION_PATTERN.match(str(text).strip())
        if not match:
            raise ValueError(f"Not a Unity version: {text!r}")
        major, minor, build, release_type, release = match.groups()
        return cls(
            int(major),
            int(minor or 0),
            int(build or 0),
            release_type or 'f',
            int(release or 1),
        )

    def key(self):
        return (self.major, self.minor, self.build)

    def is_greater_equal(self, major, minor=0, build=0):
        return self.key() >= (major, minor, build)

    def __eq__(self, other):
        if not isinstance(other, UnityVersion):
            return NotImplemented
        return self.key() == other.key() and (self.release_type, self.release) == (other.release_type, other.release)

    def __hash__(self):
        return hash((self.key(), self.release_type, self.release))

    def __str__(self):
        return f"{self.major}.{self.minor}.{self.build}{self.release_type}{self.release}"

    def __repr__(self):
        return f"UnityVersion({str(self)!r})"


def supports_assembly_definitions(version):
    # Assembly definition files arrived in 2017.3.
    return version is not None and version.is_greater_equal(2017, 3)


def language_version_for(version, requested="auto"):
    if requested != "auto":
        return requested
    if version is None:
        return UNKNOWN_VERSION_LANGUAGE_VERSION
    for (major, minor), language_version in LANGUAGE_VERSIONS:
        if version.is_greater_equal(major, minor):
            return language_version
    return FALLBACK_LANGUAGE_VERSION

# idpscim

`idpscim` is a library for the core of a sync tool. It takes users, groups
and group memberships from an identity provider and applies them to a SCIM
endpoint. It also stores the result of the last sync.

## What is in it

- **`idpscim.models`** holds the data model. It has dataclasses for `Name`,
  `User`, `Group`, `Member` and `GroupMembers`, plus the collections
  `GroupsResult`, `UsersResult` and `GroupsMembersResult`.
  - A collection's `items` field defaults to the number of its `resources`.
  - All of them are gathered in a `State`, through `StateResources`.
  - `State.to_dict()` gives camel-case, JSON-ready data.
  - `State.from_dict(data)` reads that data back. It raises `TypeError` when
    the data is malformed.
- **`idpscim.disk.DiskRepository`** stores a `State` as indented JSON in an
  open stream, such as a file. Both text and binary streams work.
- **`idpscim.s3.S3Repository`** stores a `State` as one object in an S3
  bucket, through an S3 client that you supply.
- **`idpscim.scim_api`** defines the SCIM request and response dataclasses and
  the `ScimClient` protocol. The request types include `CreateUserRequest`,
  `PutUserRequest` and `PatchGroupRequest`. The response types include
  `ListGroupsResponse`.
- **`idpscim.operations.patch_group_operations`** splits a list of
  `PatchValue` member references into `PatchGroupRequest`s. Each request holds
  at most `MAX_PATCH_GROUP_MEMBERS_PER_REQUEST` (100) members.
- **`idpscim.scim.Provider`** carries out a sync through a `ScimClient`. It
  gets, creates, updates and deletes users and groups, and it adds and removes
  group members.
- **`idpscim.utils`** has `to_json` and `to_yaml` for readable output.
- **`idpscim.version.BuildInfo`** reports version and build details.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Usage

### Keeping state in a file

```python
from idpscim.disk import DiskRepository

with open("state.json", "r+") as state_file:
    repo = DiskRepository(state_file)
    state = repo.get_state()
```

`get_state` reads the rest of the stream and decodes it. It raises these
errors:

| Error | When |
| --- | --- |
| `StateFileEmptyError` | the stream holds no data |
| `ReadingStateFileError` | reading fails |
| `RepositoryError` | the JSON cannot be decoded into a `State` |

`set_state(state)` writes the state as JSON with an indent of two, followed by
a newline. If the stream has a `flush` method, it is then flushed.

Passing `None` as the stream raises `StateFileNilError`. All of these errors
derive from `RepositoryError`, and each carries a `code` attribute such as
`"ErrStateFileEmpty"`.

### Keeping state in S3

`S3Repository` works with any client that has these two methods:

- `get_object(Bucket=..., Key=...)`, returning a mapping with a `"Body"` entry
- `put_object(Bucket=..., Key=..., Body=...)`

```python
from idpscim.s3 import S3Repository

repo = S3Repository(client, bucket="my-bucket", key="state.json")
repo.set_state(state)
state = repo.get_state()
```

The constructor raises an error when something is missing:

| Missing | Error |
| --- | --- |
| client | `S3ClientNilError` |
| bucket | `BucketMissingError` |
| key | `KeyMissingError` |

Other failures raise errors as follows:

- `set_state(None)` raises `StateNilError`.
- A client that fails, or an object that does not decode, raises
  `S3RepositoryError`. All of the errors above derive from it.

### Working against a SCIM endpoint

`Provider` wraps an object that follows the `ScimClient` protocol:

```python
from idpscim.scim import Provider

provider = Provider(scim_client)
groups = provider.get_groups()
users = provider.get_users()
members = provider.get_groups_members_brute_force(groups, users)
```

How the provider behaves:

- **Creating.** `create_groups` and `create_users` call the client's
  `create_or_get_group` and `create_or_get_user`. They return the records with
  the SCIM ids the endpoint assigned.
- **Adding members.** `create_groups_members` looks up members that have no
  SCIM id by their e-mail address, using `get_user_by_user_name`.
  `create_groups_members` and `delete_groups_members` send one PATCH request
  for every 100 members.
- **Membership checks.** `get_groups_members_brute_force` sends one
  `list_groups` query for each group and user pair. It counts a user as a
  member when the query reports any results.
- **Errors.** A failing client call is raised again as `ScimProviderError`,
  with the original exception as its cause. `Provider(None)` raises
  `ScimProviderNilError`.

### Formatting

`to_json` and `to_yaml` accept any of the following:

- plain data
- dataclasses
- objects that have a `to_dict` method

Both return an empty string for `None` or `""`. They raise `TypeError` for
values that cannot be serialized.

### Version info

`BuildInfo` falls back to defaults for fields that are empty: version
`0.0.0`, revision `0`, and `unknown` for the rest.

```python
from idpscim.version import BuildInfo

print(BuildInfo(version="1.1.1", revision="1", branch="devel").get_version_info())
# (version=1.1.1, revision=1, branch=devel)
```

`get_version_info_extended()` also reports the Python version, the build user
and the build date.

## What it does not do

- There is no command-line program. The package has no sync loop that
  compares identity provider data with stored state and decides what to
  change.
- It does not fetch users or groups from any identity provider.
- It does not include a network client for a SCIM endpoint. You supply an
  object that implements `ScimClient`.
- It does not include an S3 client. You supply one with `get_object` and
  `put_object`.
# renderaltdelete

A small terminal interface for clearing out a Render workspace. It lists the
workspaces (owners) an API token can reach, lets you pick one, shows every
service, Postgres database and Redis instance in it, and deletes the ones you
tick after you confirm.

## Parts

- `renderaltdelete.models`: frozen dataclasses `Owner`, `Service`,
  `Postgres` and `Redis`. Each has a `from_json` class method that builds it
  from a decoded JSON object. Keys are matched exactly first, then without
  regard to case; missing fields become empty strings, and a value of the
  wrong type raises `ValueError`.
- `renderaltdelete.client`: `Client`, an HTTP client for the API, and
  `RenderError`, which it raises when a request cannot be sent, when the
  response status is outside 2xx (the message is e.g. `"404 response"`), or
  when the body is not the JSON that was expected.
- `renderaltdelete.tui`: the interactive screen. `Model` holds the state and
  reacts to key names, `style_content` draws the rounded border, and `run`
  drives a `Model` in the terminal.

## Talking to the API

`Client` takes the API host name (without a scheme; requests go to
`https://<host>/v1/...`) and a bearer token.

```python
from renderaltdelete.client import Client, RenderError

client = Client("api.example.com", "token")

try:
    for owner in client.list_authorized_owners():
        print(owner.name, owner.email)
        for service in client.list_services(owner.id):
            print("  service:", service.name)
        for db in client.list_postgres(owner.id):
            print("  postgres:", db.name)
        for cache in client.list_redis(owner.id):
            print("  redis:", cache.name)
except RenderError as exc:
    print("request failed:", exc)
```

Each listing asks for at most 20 items and does not follow further pages. An
empty owner id leaves the owner filter off. `delete_service`,
`delete_postgres` and `delete_redis` take a resource id, return nothing on
success and raise `RenderError` on failure.

## Starting the interface

```python
from renderaltdelete.client import Client
from renderaltdelete.tui import run

run(Client("api.example.com", "token"))
```

`run` accepts any object with the same listing and deleting methods as
`Client` (see the `RenderService` protocol).

### Keys

| Key                 | Action                                   |
|---------------------|------------------------------------------|
| `up` / `k`          | move the cursor up                       |
| `down` / `j`        | move the cursor down                     |
| `enter` / space bar | choose, toggle a resource, or confirm    |
| `q` / `ctrl+c`      | quit at any time                         |

The flow is: choose a workspace, tick the resources to remove, move to
**Done** and press enter, then answer **Yes** on the review screen. Answering
**No** goes back to the selection. Deletions run one at a time on a background
thread, and each line shows `pending`, `working`, `deleted` or
`failed to delete: <reason>`. If a listing fails, the screen shows the error
instead.

## Driving the model directly

`Model` works without a terminal. Keys are given by name: `"up"`, `"down"`,
`"k"`, `"j"`, `"enter"`, `" "`, `"q"` and `"ctrl+c"`.

```python
from renderaltdelete.tui import Model, Status

model = Model(client)           # lists the owners straight away
model.handle_key("enter")       # pick the first workspace
model.handle_key(" ")           # tick the first resource
print(model.content())          # the screen text without the border
assert model.status is Status.SELECT
```

`handle_key` returns `True` when the key asks to quit. `Model.view()` returns
the same text as `content()` framed by the border that `style_content` draws.
`Model.wait_for_update(timeout)` returns `True` when a deletion status has
changed and `False` if nothing changed in time; `Model.join_deletions(timeout)`
returns `True` once the background deletions have finished.

## What it does not do

The package has no command-line entry point and does not read the API token
or host from a configuration file or the environment. Build a `Client`
yourself and pass it to `run`.
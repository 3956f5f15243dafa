# oapiware

Small pieces for serving an OpenAPI (Swagger) described HTTP API from a WSGI
application.

## What is inside

| Module                | Purpose                                                                    |
|-----------------------|----------------------------------------------------------------------------|
| `oapiware.header`     | Parsing HTTP headers: lists, values with parameters, `Accept*`, dates      |
| `oapiware.negotiate`  | Choosing the best content type or content encoding for a request           |
| `oapiware.router`     | A URL router with static paths, `:param` and `*wildcard` segments          |
| `oapiware.mux`        | A per-method WSGI multiplexer built on the router                          |
| `oapiware.parameter`  | Binding query, header, path, form and body parameters to Python values     |
| `oapiware.responders` | Responders that write an error status and body through a producer          |
| `oapiware.docs`       | WSGI middleware serving a Redoc or RapiDoc documentation page              |

The only runtime dependency is Werkzeug.

## Installation

```
pip install oapiware
```

## Header parsing

Functions in `oapiware.header` accept either a Werkzeug `Headers` object or a
plain mapping of header names to a string or a list of strings; names are
matched case-insensitively.

- `parse_list(header, key)` splits comma separated values, leaving commas
  inside quoted strings alone.
- `parse_value_and_params(header, key)` returns the lower-cased value and a
  dict of its `;`-separated parameters, as for `Content-Type`.
- `parse_accept(header, key)` and `parse_accept2(header, key)` return
  `AcceptSpec(value, q)` entries.
- `parse_time(header, key)` parses an HTTP date into a UTC `datetime`, or
  returns `None` when the header is missing or not a date.
- `copy_headers(header)` returns a shallow copy as a dict.

## Content negotiation

`negotiate_content_type` picks the offer that best matches the `Accept`
header. Higher quality wins; on equal quality a more specific match
(`text/html` over `text/*` over `*/*`) wins; after that, the earlier offer.
When nothing matches, the default offer is returned. Without an `Accept`
header the first offer is returned.

```python
from oapiware.negotiate import negotiate_content_type, negotiate_content_encoding

headers = {"Accept": ["text/html;q=0.5, image/png"]}
negotiate_content_type(headers, ["text/html", "image/png"], "")   # "image/png"

headers = {"Accept-Encoding": ["gzip"]}
negotiate_content_encoding(headers, ["identity", "gzip"])          # "gzip"
```

Offers may carry parameters such as `application/json; charset=utf-8`; they
are compared on their media type alone. `normalize_offer` and
`normalize_offers` strip the parameters.

## Routing

Build a `Router` from `Record` entries. A segment starting with `:` captures
one path segment, one starting with `*` captures the rest of the path.

```python
from oapiware.router import Record, Router

router = Router()
router.build([
    Record("/", "index"),
    Record("/user/:id", "user"),
    Record("/files/*path", "files"),
])

data, params, found = router.lookup("/user/777")
# data == "user", params.get("id") == "777", found is True
```

`lookup` returns the stored value, a `Params` list of `Param(name, value)`
in path order, and whether the path matched. `build` raises `RouterError`
when a key repeats a parameter name. After `build`, `size_hint` holds the
largest number of parameters in any key, unless it was set beforehand.
`next_separator(path, start)` gives the index of the next `/` or `#`.

## A method-aware WSGI application

`Mux` collects handlers per HTTP method and builds a `ServeMux`, a plain WSGI
application. Each handler is called with the Werkzeug `Request` and the
matched `Params`, and returns a Werkzeug `Response`. Requests that match no
route go to `ServeMux.not_found`, by default `default_not_found`, which
answers 404 with `404 page not found`.

```python
from werkzeug.wrappers import Response
from oapiware.mux import Mux

def show_user(request, params):
    return Response(f"hello {params.get('name')}")

mux = Mux()
app = mux.build([
    mux.get("/user/:name", show_user),
    mux.put("/user/:name", show_user),
    mux.handler("DELETE", "/user/:name", show_user),
])
```

`app` can be served by any WSGI server.

## Parameter binding

A `Parameter` describes one OpenAPI parameter: its name, location (`in_`:
`query`, `header`, `path`, `formData` or `body`), type and format, array
`items` and `collection_format`, `required`, `allow_empty_value` and
`default`. A `ParamBinder` reads and converts it:

```python
from oapiware.parameter import ParamBinder, Parameter, Items

tags = ParamBinder(Parameter("tags", "query", type="array",
                             items=Items(type="string"), collection_format="pipes"))
tags.bind_value(*tags.read_value({"tags": ["one|two"]}))   # ["one", "two"]
```

- `bind(request, route_params, consumer)` binds from a Werkzeug `Request`;
  `route_params` holds path parameters (a mapping or a list of
  `(name, value)` pairs) and `consumer` is a callable reading a body stream.
- Integers are range-checked by their format (`int8` … `int64`), numbers may
  be `float` or `double`, `byte` strings are base64-decoded, and `date` and
  `date-time` strings become `date` and `datetime` values.
- `split_by_format(data, collection_format)` splits `csv`, `ssv`, `tsv` and
  `pipes` values.
- Failures raise `ValidationError`, carrying an HTTP `code` and a `message`.

## Error responders

`error(code, data, *headers)` returns an `ErrorResponder` whose
`write_response(response, producer)` adds the given headers, sets the status
(500 when the code is not positive) and calls `producer(stream, data)` on the
response stream. `not_implemented(message)` is the same with status 501.

## Documentation pages

`redoc(opts, next_app)` and `rapidoc(opts, next_app)` answer requests for the
documentation path (by default `/docs`) with an HTML page pointing at the
spec (by default `/swagger.json`). Other requests go to `next_app`, or get a
404 when there is none. `RedocOpts` and `RapiDocOpts` set the base path,
path, spec URL, script URL and title.

```python
from oapiware.docs import RedocOpts, redoc

app = redoc(RedocOpts(title="Pet store"), app)
```

## What this package does not do

It does not load or analyse an OpenAPI document, and it has no ready-made API
server tying a spec to operations: there is no request context, no
authentication or authorization, no validation of bound values against a
schema, and no serving of the spec document itself. These pieces are meant
to be combined by your own WSGI application.

## Running the tests

```
pip install -e .[test]
pytest
```
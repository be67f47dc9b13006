# mmapsum

`mmapsum` reads a text file and adds up the numbers on each of its lines.
The work is split between two processes. The parent reads the file and
copies its contents into a memory-mapped region file. A worker process
reads that region, computes one sum per line, and writes the results back
into the same region. The parent then prints them.

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

Start the parent and give it the name of the input file when it prompts
for one:

```
$ mmapsum
Enter filename: numbers.txt
Result:
Sum: 6.00
Sum: -1.50
```

This is the output for a `numbers.txt` holding these lines:

```
1 2 3
0.5 -2
```

`mmapsum` takes no options other than `--help`. The file name is read as
one line from standard input, and only its first 255 characters are used.

Each non-empty line of input gives one output line of the form
`Sum: <value>`, where the value has two decimal places. Numbers on a line
are separated by spaces or tabs. Decimal, exponent and hexadecimal forms
are accepted, as are `inf` and `nan`. Sums are computed in single
precision. Only the first 255 bytes of each line are used, and only the
first 8183 bytes of the file (on a 64-bit build). If a line holds
something that is not a number, the worker stops with `Parse error`. If a
number or a sum is out of range, it stops with `Number too large`. In
either case `mmapsum` reports that the worker failed and exits with
status 1. It also exits with status 1, after printing `Cannot open file`,
when the input file cannot be opened.

### The worker

The parent starts the worker itself, so `mmapsum-child` is not normally
run by hand. Its only argument is the path of an existing region file:

```
mmapsum-child /path/to/region
```

The worker maps the region and then waits for a byte on standard input.
That byte tells it the data is ready. It replaces the region's contents
with the sums and writes a newline to standard output to say it is done.
If standard input closes without a byte, it exits with
`No ready signal from parent`.

## Region layout

The region is 8192 bytes long. It starts with a native unsigned size word,
which holds the number of valid bytes. The data area follows the size
word. The parent creates the region as a temporary file and removes it
when the exchange is over.

## Library use

- `mmapsum.shared`
  - `create_region(path)` creates or resizes the file and zeroes it.
  - `open_region(path)` maps an existing region file.
  - Both return a `SharedRegion`. It has `read()`, `write(data)`,
    `clear()` and `close()`, a `capacity` property and a `closed`
    property, and it works as a context manager.
  - `write` raises `ValueError` when the data is larger than the capacity.
- `mmapsum.child`
  - `sum_line(line)` returns the sum of one line.
  - `format_sum(num)` formats a sum as `Sum: <value>` with a trailing
    newline.
  - `process_data(data)` turns the whole input into the result bytes.
  - Failures raise `ChildError`.
  - `main(argv)` runs the worker.
- `mmapsum.parent`
  - `run(filename, child_command)` does the whole exchange and returns the
    result bytes.
  - `child_command` is the worker's command line without the region path,
    which is appended to it. The default runs `mmapsum.child` with the
    current Python interpreter.
  - Failures raise `ParentError`.
  - `main(argv)` is the `mmapsum` command.
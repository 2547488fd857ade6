# studyset

Three small, self-contained tools in one package:

- **Sudoku solution counter**: reads a 9×9 puzzle, prints the solutions it
  finds and reports how many there are. It stops after 10.
- **Student record store**: an in-memory key/value database of student
  records with an optional time-to-live. It is backed either by a hash table
  or by a self-balancing (AVL) binary search tree and comes with an
  interactive shell.
- **Multilayer perceptron**: recognises the 26 Latin letters from 28×28
  grayscale images. It comes in two interchangeable implementations, one
  built on weight matrices and one built on linked neuron objects.

Requires Python 3.10 or later and numpy.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Sudoku

Pass the nine rows of the puzzle as nine arguments. Use the digits `1`–`9`
for given cells and `.` for empty ones:

```
studyset-sudoku 9...7.... 2...9..53 .6..124.. 84...1.9. 5.....8.. .31..4... ..37..68. .9..5.741 47.......
```

Each solution is printed as nine lines of digits followed by a blank line.
The last line gives the count:

```
Total number of solutions: <n>
```

The search stops once more than ten solutions exist. In that case the first
ten are printed, followed by
`Total number of solutions more than 10. Please, use more keys.`

The following are reported as errors and stop the program:

- no arguments at all, which prints a usage message
- a number of rows other than nine
- a row that is not nine characters long
- a character other than `1`–`9` or `.`
- a given digit that repeats within a row, column or 3×3 box

From Python, `studyset.sudoku` offers:

- `parse_grid(rows)`, which turns nine strings into a grid with 0 for empty cells
- `check_grid(grid)`
- `can_place(grid, row, col, num)`
- `find_empty(grid)`
- `solve(grid, limit=10)`, a generator of solutions with digits tried in ascending order
- `format_grid(grid)`

Invalid input raises `SudokuError`, a subclass of `ValueError`.

## Student record store

Start the shell. It reads commands from standard input:

```
studyset-storage
```

First choose a container by its number:

```
1. Hash table
2. Binary search trees
3. Exit
4. Research
```

Then type commands. The command word is case-insensitive, except `EXIT` and
`HELP`, which are recognised only as all upper case or all lower case.

| Command | Effect |
| --- | --- |
| `SET <key> <surname> <name> <year> <city> <coins> [EX <seconds>]` | Add a record, which expires after the given time if one is set |
| `GET <key>` | Show the record stored under the key, or `(null)` |
| `EXISTS <key>` | `true` or `false` |
| `DEL <key>` | Delete the record: `true` or `false` |
| `UPDATE <key> <surname> <name> <year> <city> <coins>` | Change fields; `-` leaves a field as it is |
| `KEYS` | List all keys |
| `RENAME <old key> <new key>` | Move a record to a key that is not taken |
| `TTL <key>` | Seconds left before the record expires; `(null)` if it is absent or never expires |
| `FIND <surname> <name> <year> <city> <coins>` | List the keys of records that match the mask; `-` matches anything |
| `SHOWALL` | List all records |
| `UPLOAD <file path>` | Replace the contents with records read from a file |
| `EXPORT <file path>` | Write all records to a file |
| `CLEAR` | Remove everything |
| `STORAGE` | Go back to the container menu |
| `HELP` | Show the command table again |
| `EXIT` | Leave the program |

The shell also stops when its input ends.

Files used by `UPLOAD` and `EXPORT` hold one record per line. The fields are
separated by single spaces, in the order key, surname, name, year, city,
coins:

```
key1 Ivanov Ivan 2001 Moscow 55
key2 Petrova Anna 1999 Kazan 120
```

Years and coin counts must be non-negative integers. `UPLOAD` clears the
store before reading the file. A malformed line stops the upload with
`ERROR: bad file`, and the records read before that line stay in the store.

The **Research** option asks for two numbers: how many random records to
generate and how many times to repeat each operation. It fills a fresh hash
table and a fresh tree with the generated records. It then prints, for each
of them, the average CPU time of the set, get, delete, show-all and find
operations.

### From Python

The containers are:

- `HashTable(size=10000)` in `studyset.storage.hash_table`. Keys are spread
  over buckets by a stable 64-bit hash, and listing goes bucket by bucket.
- `AVLTree()` in `studyset.storage.avl`. Listing follows the tree in post-order.

Both share the interface of `studyset.storage.database.Database`:

- `set`, `get`, `exists`, `delete`, `update`
- `keys`, `rename`, `ttl`, `find`
- `show_all`, `export`, `upload`, `clear`

Query methods return values rather than printing. `get` returns a `Person`
or `None`, `keys` and `find` return lists of keys, and `show_all` returns
records.

Records are built from the types in `studyset.storage.records`: `Person`,
`RecordValue` and `Record`. `parse_record` reads one line of the file format
and raises `RecordFormatError` on a bad line:

```python
from studyset.storage.avl import AVLTree
from studyset.storage.records import parse_record

tree = AVLTree()
tree.set(parse_record("key1 Ivanov Ivan 2001 Moscow 55"))
tree.exists("key1")       # True
tree.rename("key1", "key2")
tree.is_balanced()        # True
tree.export("students.txt")
```

`AVLTree.export_dot(name)` writes the shape of the tree to `<name>.dot` for
viewing with Graphviz.

## Multilayer perceptron

Datasets are CSV files with one image per line. Each line holds the letter
number (1 for A up to 26 for Z) followed by 784 pixel values from 0 to 255.

```python
from studyset.perceptron.controller import Controller
from studyset.perceptron.graph_model import GraphPerceptron
from studyset.perceptron.matrix_model import MatrixModel

ctrl = Controller(MatrixModel(2), GraphPerceptron(2))
ctrl.set_hidden_size(3)          # 2 to 5 hidden layers of 128 neurons; False otherwise
ctrl.learn_from_file("train.csv")
result = ctrl.test_from_file("test.csv")
print(result.correct, result.error, result.cross_value)
print(ctrl.cross_valid("train.csv", 5))

ctrl.save_weights("weights.csv")
ctrl.load_weights("weights.csv")

ctrl.set_graph_strategy()        # switch to the graph implementation
```

The controller methods work as follows:

- `learn_from_file` runs one epoch and returns the number of samples it learned.
- `test_from_file` returns a `studyset.perceptron.common.Parameters`.
- `cross_valid` first gives the current perceptron fresh random weights. It
  then learns and tests each fold in turn and returns a line such as
  `1: 42.00% 2: 57.50% `.
- `predict(income)` takes 784 pixel intensities scaled to 0–1 and returns the
  index of the recognised letter, where 0 is A.
- `load_weights` loads the same file into both perceptrons. Their hidden
  layer counts must therefore match the file.

`MatrixModel` and `GraphPerceptron` can also be used directly.
`studyset.perceptron.matrix.Matrix` is a general matrix type with the
following operations:

- arithmetic
- `transpose`
- `determinant`
- `calc_complements`
- `inverse`

## What this package does not do

The perceptron has no graphical window, drawing area or image loader. It is
used only from Python, and there is no command for it. Images must already
be given as 784 scaled pixel values or as dataset files.
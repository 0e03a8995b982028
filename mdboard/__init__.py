# Markdown task board: parsing, in-place mutation, and lane transitions
#
# Components:
#   schema.py   - Data model (Item, Lane, Board, TaskStatus)
#   parser.py   - Line tokenizer, annotation tokenizer, item parser, board builder
#   render.py   - Item serializer and document joiner
#   engine.py   - Mutation engine (update, move, insert) and read-only queries
#   ids.py      - Block id generator and name disambiguation by probing
#   store.py    - Whole-file board storage
#   commands.py - CLI operations (claim, update, complete, fail, add-task, archive)
#   config.py   - YAML + environment configuration
#   errors.py   - ItemNotFound, LaneNotFound, AlreadyClaimed, DocumentUnreadable

CAPACITY = 1024 * 1000     # Memory size in words
WORD_SIZE = 4              # Bytes per word
WORD_FMT = '>i'            # Signed big-endian word packing
EOF = -1                   # Pushed by IN at the end of the input stream
START_ADDRESS = 0          # Default instruction pointer after reset

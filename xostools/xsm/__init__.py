"""Words, registers, memory, instruction tokenizer and disk of the XSM machine."""
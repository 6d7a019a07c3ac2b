"""Split C# type declarations into partial-type files."""

"""Shared test data.

Source texts indexed by the host fixtures. Import from here instead of
repeating them in individual test files.
"""

from __future__ import annotations

LISP_SOURCE = """\
;;; sample.el --- fixture definitions

(defvar sample-counter 0
  "Number of times `sample-add' ran.")

(defun sample-add (x y)
  "Add X and Y.
A \\"quoted\\" word and a paren ) inside the docstring."
  (setq sample-counter (1+ sample-counter)) ; bump (the counter
  (+ x y))

(defface sample-highlight
  '((t :weight bold))
  "Face for highlighted samples.")

(defun sample-close-paren ()
  "Return the close paren character."
  ?\\))

(defvar sample-buffer-name "*sample*")
"""

C_SOURCE = """\
#include "lisp.h"

DEFUN ("sample-car", Fsample_car, Ssample_car, 1, 1, 0,
       doc: /* Return the car of LIST.  */)
  (Lisp_Object list)
{
  if (CONSP (list))
    {
      return XCAR (list); /* } not a closer */
    }
  return Qnil;
}

static int unrelated_counter = 0;

void
unrelated_helper (void)
{
  unrelated_counter++;
}

DEFVAR_LISP ("sample-c-variable", Vsample_c_variable,
             doc: /* A variable defined in C.  */);
"""

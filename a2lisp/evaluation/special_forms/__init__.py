"""Registry of special forms for the a2lisp evaluator.

Maps spellings to handler functions that implement non-standard evaluation
rules. Each Interpreter interns these spellings at start-up and dispatches on
the resulting symbol identity before ordinary application.
"""

from a2lisp.evaluation.special_forms.quote_form import quote_form
from a2lisp.evaluation.special_forms.lambda_form import lambda_form
from a2lisp.evaluation.special_forms.if_form import if_form
from a2lisp.evaluation.special_forms.define_form import define_form

SPECIAL_FORMS = {
    "QUOTE": quote_form,
    "LAMBDA": lambda_form,
    "DEFINE": define_form,
    "IF": if_form,
}
